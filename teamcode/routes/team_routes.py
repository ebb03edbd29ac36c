import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teamcode.auth.dependencies import get_current_user
from teamcode.database import get_db
from teamcode.models.exercise import Exercise
from teamcode.models.team import Team
from teamcode.models.user import User
from teamcode.routes.errors import database_unavailable, not_found, record_invalid
from teamcode.routes.schemas import TeamResponse, UserResponse

router = APIRouter(tags=['teams'])

logger = logging.getLogger(__name__)


class CreateTeamRequest(BaseModel):
    name: str


class AddMemberRequest(BaseModel):
    email: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not normalized:
            raise ValueError('Email is required.')
        return normalized


class TeamDetailResponse(TeamResponse):
    users: list[UserResponse]
    exercise_ids: list[int]


def load_team(db: Session, team_id: int) -> Team:
    team = db.get(Team, team_id)
    if team is None:
        raise not_found('Team')
    return team


def ensure_owner(team: Team, user: User) -> None:
    if not user.is_owner(team):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Only the team owner can manage this team.',
        )


def ensure_member(team: Team, user: User) -> None:
    if not team.has_member(user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='You are not a member of this team.',
        )


def build_team_detail(team: Team) -> TeamDetailResponse:
    return TeamDetailResponse(
        id=team.id,
        name=team.name,
        owner_id=team.owner_id,
        created_at=team.created_at,
        users=[UserResponse.model_validate(user) for user in team.users],
        exercise_ids=[exercise.id for exercise in team.exercises],
    )


@router.post('', response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
def create_team(
    data: CreateTeamRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    team = Team(name=data.name, owner=current_user)

    try:
        saved = team.save(db)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    if not saved:
        raise record_invalid(team.errors)

    logger.info('User %s created team %s', current_user.id, team.id)
    return team


@router.get('/{team_id}', response_model=TeamDetailResponse)
def get_team(
    team_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        team = load_team(db, team_id)
        ensure_member(team, current_user)
        return build_team_detail(team)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.post('/{team_id}/members', response_model=TeamDetailResponse)
def add_member(
    team_id: int,
    data: AddMemberRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        team = load_team(db, team_id)
        ensure_owner(team, current_user)

        member = db.query(User).filter(func.lower(User.email) == data.email).first()
        if member is None:
            raise not_found('User')

        if member not in team.users:
            team.users.append(member)
            db.commit()
            db.refresh(team)
            logger.info('Added user %s to team %s', member.id, team.id)

        return build_team_detail(team)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.post('/{team_id}/exercises/{exercise_id}', response_model=TeamDetailResponse)
def attach_exercise(
    team_id: int,
    exercise_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        team = load_team(db, team_id)
        ensure_owner(team, current_user)

        exercise = db.get(Exercise, exercise_id)
        if exercise is None:
            raise not_found('Exercise')

        if exercise not in team.exercises:
            team.exercises.append(exercise)
            db.commit()
            db.refresh(team)
            logger.info('Attached exercise %s to team %s', exercise.id, team.id)

        return build_team_detail(team)
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
