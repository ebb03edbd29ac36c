"""Question model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import Session, relationship

from teamcode.database import Base
from teamcode.models.validation import BLANK_MESSAGE, ValidatedModel, add_error, validate_presence


class Question(ValidatedModel, Base):
    """A single gradable question of an exercise."""
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    score = Column(Integer, nullable=False, default=0)
    position = Column(Integer, nullable=False, default=0)

    exercise = relationship("Exercise", back_populates="questions")
    test_cases = relationship("TestCase", back_populates="question", cascade="all, delete-orphan")
    dependencies = relationship(
        "QuestionDependency",
        foreign_keys="QuestionDependency.question_1_id",
        back_populates="question_1",
        cascade="all, delete-orphan",
    )
    answers = relationship("Answer", back_populates="question", cascade="all, delete-orphan")

    def __init__(self, **kwargs):
        kwargs.setdefault('score', 0)
        kwargs.setdefault('position', 0)
        super().__init__(**kwargs)

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        validate_presence(errors, self, 'description')
        if self.exercise is None and self.exercise_id is None:
            add_error(errors, 'exercise', BLANK_MESSAGE)
        if not isinstance(self.score, int) or self.score < 0:
            add_error(errors, 'score', 'must be greater than or equal to 0')
        return errors

    def __repr__(self):
        return f"<Question {self.id} of exercise {self.exercise_id}>"
