import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from teamcode.auth.dependencies import get_current_user
from teamcode.database import get_db
from teamcode.models.user import User
from teamcode.routes.errors import database_unavailable, record_invalid
from teamcode.routes.schemas import TeamResponse, UserResponse

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)


class SignUpRequest(BaseModel):
    name: str
    email: str
    password: str
    teacher: bool = False


@router.post('', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def sign_up(data: SignUpRequest, db: Session = Depends(get_db)):
    user = User(name=data.name, email=data.email, password=data.password, teacher=data.teacher)

    try:
        saved = user.save(db)
    except IntegrityError as exc:
        # Lost a race with a concurrent sign-up using the same email.
        db.rollback()
        raise record_invalid({'email': ['has already been taken']}) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc

    if not saved:
        raise record_invalid(user.errors)

    logger.info('Created user %s', user.id)
    return user


@router.get('/me/teams', response_model=list[TeamResponse])
def list_my_teams(current_user: User = Depends(get_current_user)):
    try:
        return current_user.teams_from_where_belongs()
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
