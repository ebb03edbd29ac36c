import itertools
import os

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from teamcode.auth import jwt_handler  # noqa: E402
from teamcode.database import Base, get_db  # noqa: E402
from teamcode.main import app  # noqa: E402
from teamcode.models import Answer, Exercise, Question, QuestionDependency, Team, TestCase, User  # noqa: E402

_sequence = itertools.count(1)


@pytest.fixture
def db():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def build_user():
    def factory(**overrides) -> User:
        number = next(_sequence)
        attributes = {
            'name': f'User {number}',
            'email': f'user{number}@example.com',
            'password': 'secret123',
        }
        attributes.update(overrides)
        return User(**attributes)

    return factory


@pytest.fixture
def create_user(db, build_user):
    def factory(**overrides) -> User:
        user = build_user(**overrides)
        assert user.save(db), user.errors
        return user

    return factory


@pytest.fixture
def create_exercise(db, create_user):
    def factory(**overrides) -> Exercise:
        attributes = {'title': f'Exercise {next(_sequence)}'}
        attributes.update(overrides)
        if 'user' not in attributes:
            attributes['user'] = create_user(teacher=True)
        exercise = Exercise(**attributes)
        assert exercise.save(db), exercise.errors
        return exercise

    return factory


@pytest.fixture
def create_team(db, create_user):
    def factory(owner: User | None = None, users=(), exercises=(), **overrides) -> Team:
        team = Team(
            name=overrides.pop('name', f'Team {next(_sequence)}'),
            owner=owner or create_user(),
            users=list(users),
            exercises=list(exercises),
            **overrides,
        )
        assert team.save(db), team.errors
        return team

    return factory


@pytest.fixture
def create_question(db, create_exercise):
    def factory(exercise: Exercise | None = None, **overrides) -> Question:
        attributes = {'description': f'Question {next(_sequence)}'}
        attributes.update(overrides)
        question = Question(exercise=exercise or create_exercise(), **attributes)
        assert question.save(db), question.errors
        return question

    return factory


@pytest.fixture
def create_pair_of_questions(create_question):
    def factory(exercise: Exercise | None = None) -> list[Question]:
        return [create_question(exercise=exercise), create_question(exercise=exercise)]

    return factory


@pytest.fixture
def create_dependency(db):
    def factory(question_1: Question, question_2: Question, operator: str) -> QuestionDependency:
        dependency = QuestionDependency(question_1=question_1, question_2=question_2, operator=operator)
        assert dependency.save(db), dependency.errors
        return dependency

    return factory


@pytest.fixture
def create_test_case(db, create_question):
    def factory(question: Question | None = None, **overrides) -> TestCase:
        attributes = {'title': 'sample', 'input': '2 3', 'output': '5'}
        attributes.update(overrides)
        test_case = TestCase(question=question or create_question(), **attributes)
        assert test_case.save(db), test_case.errors
        return test_case

    return factory


@pytest.fixture
def create_answer(db, create_user, create_team, create_question):
    def factory(
        question: Question | None = None,
        team: Team | None = None,
        user: User | None = None,
        correct: bool = False,
        **overrides,
    ) -> Answer:
        answer = Answer(
            content=overrides.pop('content', 'print(sum(map(int, input().split())))'),
            question=question or create_question(),
            team=team or create_team(),
            user=user or create_user(),
            correct=correct,
            **overrides,
        )
        assert answer.save(db), answer.errors
        return answer

    return factory


@pytest.fixture
def auth_headers():
    def factory(user: User) -> dict[str, str]:
        token = jwt_handler.create_access_token(user_id=user.id, email=user.email)
        return {'Authorization': f'Bearer {token}'}

    return factory


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
