import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamcode.auth.dependencies import get_current_user, require_teacher
from teamcode.database import get_db
from teamcode.models.exercise import Exercise
from teamcode.models.question import Question
from teamcode.models.question_dependency import OPERATORS, QuestionDependency
from teamcode.models.test_case import TestCase
from teamcode.models.user import User
from teamcode.models.validation import RecordInvalid
from teamcode.routes.errors import database_unavailable, not_found, record_invalid
from teamcode.routes.team_routes import ensure_member, load_team
from teamcode.services.dependencies import TeamDependencyChecker, able_to_answer

router = APIRouter(tags=['exercises'])

logger = logging.getLogger(__name__)


class CreateQuestionRequest(BaseModel):
    description: str
    score: int = Field(default=0, ge=0)


class CreateExerciseRequest(BaseModel):
    title: str
    description: str | None = None
    questions: list[CreateQuestionRequest] = []


class CreateTestCaseRequest(BaseModel):
    title: str | None = None
    input: str = ''
    output: str


class CreateDependencyRequest(BaseModel):
    question_id: int
    operator: str

    @field_validator('operator')
    @classmethod
    def validate_operator(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in OPERATORS:
            raise ValueError('Operator must be OR or AND.')
        return normalized


class QuestionResponse(BaseModel):
    id: int
    description: str
    score: int
    position: int

    class Config:
        from_attributes = True


class ExerciseResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    user_id: int | None = None
    questions: list[QuestionResponse]

    class Config:
        from_attributes = True


class TestCaseResponse(BaseModel):
    id: int
    title: str | None = None
    input: str
    output: str
    question_id: int

    class Config:
        from_attributes = True


class DependencyResponse(BaseModel):
    id: int
    question_1_id: int
    question_2_id: int
    operator: str

    class Config:
        from_attributes = True


class QuestionStatusResponse(QuestionResponse):
    locked: bool


def load_exercise(db: Session, exercise_id: int) -> Exercise:
    exercise = db.get(Exercise, exercise_id)
    if exercise is None:
        raise not_found('Exercise')
    return exercise


def load_question(db: Session, exercise: Exercise, question_id: int) -> Question:
    question = db.get(Question, question_id)
    if question is None or question.exercise_id != exercise.id:
        raise not_found('Question')
    return question


def ensure_author(exercise: Exercise, user: User) -> None:
    if exercise.user_id != user.id and not user.admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Only the exercise author can change this exercise.',
        )


@router.post('', response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
def create_exercise(
    data: CreateExerciseRequest,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    try:
        exercise = Exercise(title=data.title, description=data.description, user=current_user)
        exercise.save_or_raise(db, commit=False)

        for position, question_data in enumerate(data.questions):
            question = Question(
                exercise=exercise,
                description=question_data.description,
                score=question_data.score,
                position=position,
            )
            question.save_or_raise(db, commit=False)

        db.commit()
        db.refresh(exercise)
    except RecordInvalid as exc:
        db.rollback()
        raise record_invalid(exc.errors) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    logger.info('User %s created exercise %s with %s questions', current_user.id, exercise.id, len(data.questions))
    return exercise


@router.get('/{exercise_id}', response_model=ExerciseResponse)
def get_exercise(
    exercise_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    del current_user
    try:
        return load_exercise(db, exercise_id)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post(
    '/{exercise_id}/questions/{question_id}/test-cases',
    response_model=TestCaseResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_test_case(
    exercise_id: int,
    question_id: int,
    data: CreateTestCaseRequest,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    try:
        exercise = load_exercise(db, exercise_id)
        ensure_author(exercise, current_user)
        question = load_question(db, exercise, question_id)

        test_case = TestCase(question=question, title=data.title, input=data.input, output=data.output)
        if not test_case.save(db):
            raise record_invalid(test_case.errors)

        return test_case
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.post(
    '/{exercise_id}/questions/{question_id}/dependencies',
    response_model=DependencyResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_dependency(
    exercise_id: int,
    question_id: int,
    data: CreateDependencyRequest,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    try:
        exercise = load_exercise(db, exercise_id)
        ensure_author(exercise, current_user)
        question = load_question(db, exercise, question_id)
        prerequisite = load_question(db, exercise, data.question_id)

        dependency = QuestionDependency(question_1=question, question_2=prerequisite, operator=data.operator)
        if not dependency.save(db):
            raise record_invalid(dependency.errors)

        return dependency
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.get('/{exercise_id}/questions', response_model=list[QuestionStatusResponse])
def list_questions(
    exercise_id: int,
    team_id: int = Query(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        exercise = load_exercise(db, exercise_id)
        team = load_team(db, team_id)
        ensure_member(team, current_user)
        if exercise not in team.exercises:
            raise not_found('Exercise')

        checker = TeamDependencyChecker(db)
        return [
            QuestionStatusResponse(
                id=question.id,
                description=question.description,
                score=question.score,
                position=question.position,
                locked=not able_to_answer(question, team, checker),
            )
            for question in exercise.questions
        ]
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
