from teamcode.models.user import User


def test_sign_up_creates_user_with_anonymous_id(client, db) -> None:
    response = client.post(
        '/users',
        json={'name': 'Ada', 'email': 'Ada@Example.com', 'password': 'secret123'},
    )

    assert response.status_code == 201
    body = response.json()
    assert body['email'] == 'ada@example.com'
    assert body['teacher'] is False
    assert body['admin'] is False
    assert body['anonymous_id']
    assert db.query(User).count() == 1


def test_sign_up_reports_field_errors(client, db) -> None:
    response = client.post(
        '/users',
        json={'name': '', 'email': 'user@example..com', 'password': 'secret123'},
    )

    assert response.status_code == 422
    errors = response.json()['detail']['errors']
    assert errors['name'] == ["can't be blank"]
    assert errors['email'] == ['is invalid']
    assert db.query(User).count() == 0


def test_sign_up_rejects_password_over_72_bytes(client, db) -> None:
    response = client.post(
        '/users',
        json={'name': 'Ada', 'email': 'ada@example.com', 'password': 'x' * 80},
    )

    assert response.status_code == 422
    assert response.json()['detail']['errors'] == {'password': ['is too long (maximum is 72 bytes)']}
    assert db.query(User).count() == 0


def test_sign_up_rejects_duplicated_email(client, create_user) -> None:
    create_user(email='taken@example.com')

    response = client.post(
        '/users',
        json={'name': 'Other', 'email': 'taken@example.com', 'password': 'secret123'},
    )

    assert response.status_code == 422
    assert response.json()['detail']['errors']['email'] == ['has already been taken']


def test_list_my_teams_returns_owned_and_member_teams(client, create_user, create_team, auth_headers) -> None:
    user = create_user()
    owned = create_team(owner=user)
    joined = create_team(users=[user])
    create_team()

    response = client.get('/users/me/teams', headers=auth_headers(user))

    assert response.status_code == 200
    assert {team['id'] for team in response.json()} == {owned.id, joined.id}
