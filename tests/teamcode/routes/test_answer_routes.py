import pytest

from teamcode.models.answer import Answer


@pytest.fixture
def member(create_user):
    return create_user()


@pytest.fixture
def exercise(create_exercise):
    return create_exercise()


@pytest.fixture
def team(create_team, member, exercise):
    return create_team(users=[member], exercises=[exercise])


@pytest.fixture
def questions(create_pair_of_questions, create_dependency, exercise):
    pair = create_pair_of_questions(exercise=exercise)
    create_dependency(pair[0], pair[1], 'AND')
    return pair


def test_submit_answer_is_graded(client, db, member, team, questions, create_test_case, auth_headers) -> None:
    test_case = create_test_case(question=questions[1], output='5')

    response = client.post(
        '/answers',
        json={
            'team_id': team.id,
            'question_id': questions[1].id,
            'content': 'print(5)',
            'outputs': {str(test_case.id): '5'},
        },
        headers=auth_headers(member),
    )

    assert response.status_code == 201
    body = response.json()
    assert body['correct'] is True
    assert (body['passed_test_cases'], body['total_test_cases']) == (1, 1)
    assert db.query(Answer).count() == 1


def test_submit_answer_to_locked_question_is_forbidden(client, db, member, team, questions, auth_headers) -> None:
    response = client.post(
        '/answers',
        json={'team_id': team.id, 'question_id': questions[0].id, 'content': 'print(5)'},
        headers=auth_headers(member),
    )

    assert response.status_code == 403
    assert response.json() == {
        'detail': 'This question is locked until its dependencies are answered correctly.',
    }
    assert db.query(Answer).count() == 0


def test_correct_prerequisite_unlocks_question(
    client, member, team, questions, create_answer, auth_headers,
) -> None:
    create_answer(question=questions[1], team=team, user=member, correct=True)

    response = client.post(
        '/answers',
        json={'team_id': team.id, 'question_id': questions[0].id, 'content': 'print(5)'},
        headers=auth_headers(member),
    )

    assert response.status_code == 201
    assert response.json()['correct'] is False


def test_submit_answer_requires_team_membership(client, create_user, team, questions, auth_headers) -> None:
    response = client.post(
        '/answers',
        json={'team_id': team.id, 'question_id': questions[1].id, 'content': 'print(5)'},
        headers=auth_headers(create_user()),
    )

    assert response.status_code == 403
    assert response.json() == {'detail': 'You are not a member of this team.'}


def test_submit_answer_rejects_blank_content(client, member, team, questions, auth_headers) -> None:
    response = client.post(
        '/answers',
        json={'team_id': team.id, 'question_id': questions[1].id, 'content': ''},
        headers=auth_headers(member),
    )

    assert response.status_code == 422
    assert response.json()['detail']['errors'] == {'content': ["can't be blank"]}


def test_get_test_case_result(client, member, team, questions, create_test_case, auth_headers) -> None:
    test_case = create_test_case(question=questions[1], output='5')
    submitted = client.post(
        '/answers',
        json={
            'team_id': team.id,
            'question_id': questions[1].id,
            'content': 'print(4)',
            'outputs': {str(test_case.id): '4'},
        },
        headers=auth_headers(member),
    ).json()

    response = client.get(f"/answers/{submitted['id']}/results/{test_case.id}", headers=auth_headers(member))

    assert response.status_code == 200
    results = response.json()
    assert len(results) == 1
    assert results[0]['answer_id'] == submitted['id']
    assert results[0]['test_case_id'] == test_case.id
    assert results[0]['output'] == '4'
    assert results[0]['passed'] is False


def test_get_test_case_result_returns_not_found_for_unknown_answer(client, member, auth_headers) -> None:
    response = client.get('/answers/999/results/1', headers=auth_headers(member))

    assert response.status_code == 404
    assert response.json() == {'detail': 'Answer not found.'}
