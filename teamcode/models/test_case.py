"""Test case model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Session, relationship

from teamcode.database import Base
from teamcode.models.validation import BLANK_MESSAGE, ValidatedModel, add_error, validate_presence


class TestCase(ValidatedModel, Base):
    """Expected output for one input of a question."""
    __tablename__ = "test_cases"
    __test__ = False  # keep pytest from collecting the model

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String)
    input = Column(Text, nullable=False, default='')
    output = Column(Text, nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)

    question = relationship("Question", back_populates="test_cases")
    results = relationship("AnswerTestCaseResult", back_populates="test_case", cascade="all, delete-orphan")

    def __init__(self, **kwargs):
        kwargs.setdefault('input', '')
        super().__init__(**kwargs)

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        validate_presence(errors, self, 'output')
        if self.question is None and self.question_id is None:
            add_error(errors, 'question', BLANK_MESSAGE)
        return errors
