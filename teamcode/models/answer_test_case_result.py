"""Stored outcome of running an answer against a test case."""

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import Session, relationship

from teamcode.database import Base
from teamcode.models.validation import BLANK_MESSAGE, ValidatedModel, add_error, validate_presence


def normalize_output(output: str | None) -> str:
    lines = (output or '').replace('\r\n', '\n').split('\n')
    return '\n'.join(line.rstrip() for line in lines).rstrip('\n')


class AnswerTestCaseResult(ValidatedModel, Base):
    __tablename__ = "answer_test_case_results"

    id = Column(Integer, primary_key=True)
    answer_id = Column(Integer, ForeignKey("answers.id", ondelete="CASCADE"), nullable=False)
    test_case_id = Column(Integer, ForeignKey("test_cases.id", ondelete="CASCADE"), nullable=False)
    output = Column(Text, nullable=False)

    answer = relationship("Answer", back_populates="test_case_results")
    test_case = relationship("TestCase", back_populates="results")

    @classmethod
    def result(cls, db: Session, answer, test_case) -> list["AnswerTestCaseResult"]:
        return db.query(cls).filter(
            cls.answer_id == answer.id,
            cls.test_case_id == test_case.id,
        ).all()

    @property
    def passed(self) -> bool:
        return normalize_output(self.output) == normalize_output(self.test_case.output)

    def validate(self, db: Session) -> dict[str, list[str]]:
        errors: dict[str, list[str]] = {}
        validate_presence(errors, self, 'output')
        for field in ('answer', 'test_case'):
            if getattr(self, field) is None and getattr(self, f'{field}_id') is None:
                add_error(errors, field, BLANK_MESSAGE)
        return errors
