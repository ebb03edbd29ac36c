"""Exercise model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Session, relationship

from teamcode.database import Base
from teamcode.models.associations import exercises_teams
from teamcode.models.validation import ValidatedModel, validate_presence


class Exercise(ValidatedModel, Base):
    """A set of questions authored by a teacher."""
    __tablename__ = "exercises"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="exercises")
    questions = relationship(
        "Question",
        back_populates="exercise",
        cascade="all, delete-orphan",
        order_by="Question.position",
    )
    teams = relationship("Team", secondary=exercises_teams, back_populates="exercises")

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        validate_presence(errors, self, 'title')
        return errors
