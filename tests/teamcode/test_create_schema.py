import pytest
from sqlalchemy.exc import OperationalError

from teamcode import create_schema


def test_main_reports_ready_schema(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(create_schema, 'init_db', lambda: None)

    create_schema.main()

    assert 'Schema ready on' in capsys.readouterr().out


def test_main_exits_when_database_fails(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def failing_init_db() -> None:
        raise OperationalError('CREATE TABLE users', {}, Exception('unable to open database file'))

    monkeypatch.setattr(create_schema, 'init_db', failing_init_db)

    with pytest.raises(SystemExit) as exit_info:
        create_schema.main()

    assert exit_info.value.code == 1
    assert 'Schema creation failed' in capsys.readouterr().err
