"""User model definitions."""

import re
import secrets
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func
from sqlalchemy.orm import Session, object_session, relationship

from teamcode.auth import passwords
from teamcode.core import config
from teamcode.database import Base
from teamcode.models.associations import teams_users
from teamcode.models.validation import (
    BLANK_MESSAGE,
    ValidatedModel,
    add_error,
    is_blank,
    validate_boolean,
    validate_presence,
)

VALID_EMAIL_REGEX = re.compile(r'\A[\w+\-.]+@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+\Z', re.IGNORECASE | re.ASCII)


class User(ValidatedModel, Base):
    """Represents an application user (student or teacher)."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_digest = Column(String, nullable=False)
    teacher = Column(Boolean, nullable=False, default=False)
    admin = Column(Boolean, nullable=False, default=False)
    anonymous_id = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    teams_created = relationship("Team", back_populates="owner", cascade="all, delete-orphan")
    teams = relationship("Team", secondary=teams_users, back_populates="users")
    exercises = relationship("Exercise", back_populates="user")
    answers = relationship("Answer", back_populates="user")

    def __init__(self, **kwargs):
        kwargs.setdefault('teacher', False)
        kwargs.setdefault('admin', False)
        super().__init__(**kwargs)

    @property
    def password(self) -> str | None:
        return self.__dict__.get('_password')

    @password.setter
    def password(self, value: str | None) -> None:
        self._password = value
        if value and not passwords.password_too_long(value):
            self.password_digest = passwords.hash_password(value)

    def authenticate(self, password: str) -> bool:
        if not password or not self.password_digest:
            return False
        return passwords.verify_password(password, self.password_digest)

    def generate_anonymous_id(self) -> None:
        if is_blank(self.anonymous_id):
            self.anonymous_id = secrets.token_hex(config.ANONYMOUS_ID_BYTES)

    def before_validation(self) -> None:
        if isinstance(self.email, str):
            self.email = self.email.strip().lower()
        self.generate_anonymous_id()

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        validate_presence(errors, self, 'name', 'email', 'anonymous_id')
        validate_boolean(errors, self, 'teacher', 'admin')

        assigned_password = '_password' in self.__dict__
        if (assigned_password and is_blank(self.password)) or (not assigned_password and not self.password_digest):
            add_error(errors, 'password', BLANK_MESSAGE)
        elif assigned_password and passwords.password_too_long(self.password):
            add_error(errors, 'password', f'is too long (maximum is {passwords.MAX_PASSWORD_BYTES} bytes)')

        if not is_blank(self.email):
            if not VALID_EMAIL_REGEX.match(self.email):
                add_error(errors, 'email', 'is invalid')
            elif self._email_taken(db):
                add_error(errors, 'email', 'has already been taken')

        return errors

    def _email_taken(self, db: Session) -> bool:
        query = db.query(User.id).filter(func.lower(User.email) == self.email.lower())
        if self.id is not None:
            query = query.filter(User.id != self.id)
        return query.first() is not None

    def is_owner(self, team) -> bool:
        if team.owner is not None:
            return team.owner is self
        return self.id is not None and team.owner_id == self.id

    def teams_from_where_belongs(self) -> list:
        teams = list(self.teams_created)
        teams.extend(team for team in self.teams if team not in teams)
        return teams

    def able_to_answer(self, question, team, checker=None) -> bool:
        from teamcode.services.dependencies import TeamDependencyChecker, able_to_answer

        if checker is None:
            db = object_session(self)
            if db is None:
                raise ValueError("able_to_answer needs a checker when the user is not attached to a session")
            checker = TeamDependencyChecker(db)
        return able_to_answer(question, team, checker)

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"
