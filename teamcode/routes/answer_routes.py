import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamcode.auth.dependencies import get_current_user
from teamcode.database import get_db
from teamcode.models.answer import Answer
from teamcode.models.answer_test_case_result import AnswerTestCaseResult
from teamcode.models.question import Question
from teamcode.models.test_case import TestCase
from teamcode.models.user import User
from teamcode.models.validation import RecordInvalid
from teamcode.routes.errors import database_unavailable, not_found, record_invalid
from teamcode.routes.team_routes import ensure_member, load_team
from teamcode.services.grading import grade_answer

router = APIRouter(tags=['answers'])

logger = logging.getLogger(__name__)


class SubmitAnswerRequest(BaseModel):
    team_id: int
    question_id: int
    content: str
    outputs: dict[int, str] = {}


class AnswerResponse(BaseModel):
    id: int
    content: str
    correct: bool
    question_id: int
    user_id: int
    team_id: int
    created_at: datetime | None = None
    passed_test_cases: int
    total_test_cases: int


class AnswerTestCaseResultResponse(BaseModel):
    id: int
    answer_id: int
    test_case_id: int
    output: str
    passed: bool

    class Config:
        from_attributes = True


@router.post('', response_model=AnswerResponse, status_code=status.HTTP_201_CREATED)
def submit_answer(
    data: SubmitAnswerRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        team = load_team(db, data.team_id)
        ensure_member(team, current_user)

        question = db.get(Question, data.question_id)
        if question is None or question.exercise not in team.exercises:
            raise not_found('Question')

        if not current_user.able_to_answer(question, team):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='This question is locked until its dependencies are answered correctly.',
            )

        answer = Answer(content=data.content, question=question, user=current_user, team=team)
        answer.save_or_raise(db, commit=False)
        summary = grade_answer(db, answer, data.outputs)
    except RecordInvalid as exc:
        db.rollback()
        raise record_invalid(exc.errors) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    logger.info('User %s answered question %s for team %s', current_user.id, question.id, team.id)
    return AnswerResponse(
        id=answer.id,
        content=answer.content,
        correct=answer.correct,
        question_id=answer.question_id,
        user_id=answer.user_id,
        team_id=answer.team_id,
        created_at=answer.created_at,
        passed_test_cases=summary.passed,
        total_test_cases=summary.total,
    )


@router.get('/{answer_id}/results/{test_case_id}', response_model=list[AnswerTestCaseResultResponse])
def get_test_case_result(
    answer_id: int,
    test_case_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        answer = db.get(Answer, answer_id)
        if answer is None:
            raise not_found('Answer')
        ensure_member(answer.team, current_user)

        test_case = db.get(TestCase, test_case_id)
        if test_case is None:
            raise not_found('Test case')

        return AnswerTestCaseResult.result(db, answer, test_case)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
