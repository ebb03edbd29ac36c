import logging
from threading import Lock

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from teamcode.core import config


logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    connect_args = {}
    if database_url.startswith('sqlite'):
        connect_args['check_same_thread'] = False

    new_engine = create_engine(database_url, echo=echo, connect_args=connect_args)

    if database_url.startswith('sqlite'):
        # Join tables rely on ON DELETE CASCADE, which SQLite only honours when asked.
        @event.listens_for(new_engine, 'connect')
        def _enable_foreign_keys(dbapi_connection, _connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    return new_engine


engine = build_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schema_checked = False

INDEX_STATEMENTS = [
    'CREATE INDEX IF NOT EXISTS idx_answers_question_team_correct ON answers(question_id, team_id, correct)',
    'CREATE INDEX IF NOT EXISTS idx_question_dependencies_question_operator '
    'ON question_dependencies(question_1_id, operator)',
    'CREATE INDEX IF NOT EXISTS idx_answer_test_case_results_pair '
    'ON answer_test_case_results(answer_id, test_case_id)',
]


def init_db() -> None:
    # Model modules register their tables on Base when imported.
    from teamcode import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    ensure_schema()


def ensure_schema() -> None:
    global _schema_checked

    if _schema_checked:
        return

    with _schema_lock:
        if _schema_checked:
            return

        inspector = inspect(engine)
        table_names = set(inspector.get_table_names())
        required_tables = {'answers', 'question_dependencies', 'answer_test_case_results'}

        if not required_tables.issubset(table_names):
            logger.warning('Skipping index bootstrap, missing tables: %s', sorted(required_tables - table_names))
            _schema_checked = True
            return

        with engine.begin() as connection:
            for statement in INDEX_STATEMENTS:
                connection.execute(text(statement))

        _schema_checked = True


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
