"""Team model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Session, relationship

from teamcode.database import Base
from teamcode.models.associations import exercises_teams, teams_users
from teamcode.models.validation import BLANK_MESSAGE, ValidatedModel, add_error, validate_presence


class Team(ValidatedModel, Base):
    """A group of users working through exercises together."""
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    owner = relationship("User", back_populates="teams_created")
    users = relationship("User", secondary=teams_users, back_populates="teams")
    exercises = relationship("Exercise", secondary=exercises_teams, back_populates="teams")
    answers = relationship("Answer", back_populates="team", cascade="all, delete-orphan")

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        validate_presence(errors, self, 'name')
        if self.owner is None and self.owner_id is None:
            add_error(errors, 'owner', BLANK_MESSAGE)
        return errors

    def has_member(self, user) -> bool:
        return user is self.owner or user in self.users

    def __repr__(self):
        return f"<Team {self.id}: {self.name}>"
