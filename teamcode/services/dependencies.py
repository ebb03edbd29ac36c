"""Decide whether a team may attempt a question.

A question is gated by its outgoing ``QuestionDependency`` edges. Only the
direct prerequisites are inspected, so evaluation never walks the graph
and stays finite even if the stored edges were to form a cycle.
"""

from typing import Protocol

from sqlalchemy.orm import Session

from teamcode.models.answer import Answer
from teamcode.models.question_dependency import AND_OPERATOR, OR_OPERATOR, QuestionDependency


class DependencyChecker(Protocol):
    def or_dependencies_completed(self, question, team) -> bool:
        ...

    def and_dependencies_completed(self, question, team) -> bool:
        ...


class TeamDependencyChecker:
    """Checks prerequisites against the correct answers stored for a team."""

    def __init__(self, db: Session):
        self.db = db

    def or_dependencies_completed(self, question, team) -> bool:
        prerequisite_ids = self._prerequisite_ids(question, OR_OPERATOR)
        if not prerequisite_ids:
            return True
        return bool(self._correctly_answered_ids(prerequisite_ids, team))

    def and_dependencies_completed(self, question, team) -> bool:
        prerequisite_ids = self._prerequisite_ids(question, AND_OPERATOR)
        if not prerequisite_ids:
            return True
        return self._correctly_answered_ids(prerequisite_ids, team) == prerequisite_ids

    def _prerequisite_ids(self, question, operator: str) -> set[int]:
        rows = self.db.query(QuestionDependency.question_2_id).filter(
            QuestionDependency.question_1_id == question.id,
            QuestionDependency.operator == operator,
        ).all()
        return {question_id for (question_id,) in rows}

    def _correctly_answered_ids(self, question_ids: set[int], team) -> set[int]:
        rows = self.db.query(Answer.question_id).filter(
            Answer.question_id.in_(sorted(question_ids)),
            Answer.team_id == team.id,
            Answer.correct.is_(True),
        ).distinct().all()
        return {question_id for (question_id,) in rows}


def able_to_answer(question, team, checker: DependencyChecker) -> bool:
    or_completed = checker.or_dependencies_completed(question, team)
    and_completed = checker.and_dependencies_completed(question, team)
    return or_completed and and_completed


def locked_questions(exercise, team, checker: DependencyChecker) -> list:
    return [question for question in exercise.questions if not able_to_answer(question, team, checker)]
