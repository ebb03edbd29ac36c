"""Answer model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Session, relationship

from teamcode.database import Base
from teamcode.models.validation import BLANK_MESSAGE, ValidatedModel, add_error, validate_presence


class Answer(ValidatedModel, Base):
    """A submission for a question, made by a user on behalf of a team."""
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    correct = Column(Boolean, nullable=False, default=False)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    question = relationship("Question", back_populates="answers")
    user = relationship("User", back_populates="answers")
    team = relationship("Team", back_populates="answers")
    test_case_results = relationship(
        "AnswerTestCaseResult",
        back_populates="answer",
        cascade="all, delete-orphan",
    )

    def __init__(self, **kwargs):
        kwargs.setdefault('correct', False)
        super().__init__(**kwargs)

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        validate_presence(errors, self, 'content')
        for field in ('question', 'user', 'team'):
            if getattr(self, field) is None and getattr(self, f'{field}_id') is None:
                add_error(errors, field, BLANK_MESSAGE)
        return errors
