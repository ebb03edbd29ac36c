"""Question dependency edges.

``question_1`` depends on ``question_2``. Edges leaving the same question
with the same operator form one group: an ``OR`` group is satisfied by any
prerequisite, an ``AND`` group only by all of them.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Session, relationship

from teamcode.database import Base
from teamcode.models.validation import BLANK_MESSAGE, ValidatedModel, add_error

OR_OPERATOR = 'OR'
AND_OPERATOR = 'AND'
OPERATORS = (OR_OPERATOR, AND_OPERATOR)


class QuestionDependency(ValidatedModel, Base):
    __tablename__ = "question_dependencies"
    __table_args__ = (
        UniqueConstraint("question_1_id", "question_2_id", name="uq_question_dependencies_pair"),
        CheckConstraint("operator IN ('OR', 'AND')", name="ck_question_dependencies_operator"),
    )

    id = Column(Integer, primary_key=True)
    question_1_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    question_2_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    operator = Column(String(3), nullable=False)

    question_1 = relationship("Question", foreign_keys=[question_1_id], back_populates="dependencies")
    question_2 = relationship("Question", foreign_keys=[question_2_id])

    def before_validation(self) -> None:
        if isinstance(self.operator, str):
            self.operator = self.operator.strip().upper()

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}

        if self.operator not in OPERATORS:
            add_error(errors, 'operator', 'must be OR or AND')

        dependent = self.question_1
        prerequisite = self.question_2
        if dependent is None:
            add_error(errors, 'question_1', BLANK_MESSAGE)
        if prerequisite is None:
            add_error(errors, 'question_2', BLANK_MESSAGE)
        if dependent is None or prerequisite is None:
            return errors

        if dependent is prerequisite:
            add_error(errors, 'question_2', "can't be the question itself")
            return errors

        if dependent.id is None or prerequisite.id is None:
            return errors

        duplicate = db.query(QuestionDependency.id).filter(
            QuestionDependency.question_1_id == dependent.id,
            QuestionDependency.question_2_id == prerequisite.id,
        )
        if self.id is not None:
            duplicate = duplicate.filter(QuestionDependency.id != self.id)
        if duplicate.first() is not None:
            add_error(errors, 'question_2', 'is already a dependency')
        elif depends_on(db, prerequisite.id, dependent.id):
            add_error(errors, 'question_2', 'would create a circular dependency')

        return errors


def depends_on(db: Session, question_id: int, target_id: int) -> bool:
    """Whether ``question_id`` reaches ``target_id`` through stored edges."""
    visited: set[int] = set()
    frontier = {question_id}

    while frontier:
        if target_id in frontier:
            return True
        visited.update(frontier)
        rows = db.query(QuestionDependency.question_2_id).filter(
            QuestionDependency.question_1_id.in_(sorted(frontier)),
        ).all()
        frontier = {prerequisite_id for (prerequisite_id,) in rows} - visited

    return False
