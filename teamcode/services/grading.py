import logging

from pydantic import BaseModel
from sqlalchemy.orm import Session

from teamcode.models.answer import Answer
from teamcode.models.answer_test_case_result import AnswerTestCaseResult
from teamcode.models.validation import is_blank

logger = logging.getLogger(__name__)


class GradingSummary(BaseModel):
    answer_id: int
    passed: int
    total: int
    correct: bool


def grade_answer(db: Session, answer: Answer, outputs: dict[int, str], commit: bool = True) -> GradingSummary:
    """Store one result per test case and mark the answer correct when all pass.

    ``outputs`` maps test case ids to the output the answer produced. Test
    cases without a (non-blank) output count as failed and get no result row.
    """
    test_cases = list(answer.question.test_cases)
    passed = 0

    for test_case in test_cases:
        for stale in AnswerTestCaseResult.result(db, answer, test_case):
            db.delete(stale)

        output = outputs.get(test_case.id)
        if is_blank(output):
            continue

        result = AnswerTestCaseResult(answer=answer, test_case=test_case, output=output)
        result.save_or_raise(db, commit=False)
        if result.passed:
            passed += 1

    answer.correct = bool(test_cases) and passed == len(test_cases)
    if commit:
        db.commit()
        db.refresh(answer)
    else:
        db.flush()

    logger.info(
        'Graded answer %s: %s/%s test cases passed (correct=%s)',
        answer.id,
        passed,
        len(test_cases),
        answer.correct,
    )
    return GradingSummary(answer_id=answer.id, passed=passed, total=len(test_cases), correct=answer.correct)
