from teamcode.models.answer import Answer
from teamcode.models.answer_test_case_result import AnswerTestCaseResult
from teamcode.models.exercise import Exercise
from teamcode.models.question import Question
from teamcode.models.question_dependency import QuestionDependency
from teamcode.models.team import Team
from teamcode.models.test_case import TestCase
from teamcode.models.user import User
from teamcode.models.validation import RecordInvalid

__all__ = [
    'Answer',
    'AnswerTestCaseResult',
    'Exercise',
    'Question',
    'QuestionDependency',
    'RecordInvalid',
    'Team',
    'TestCase',
    'User',
]
