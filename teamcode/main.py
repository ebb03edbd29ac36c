import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from teamcode.core import config
from teamcode.core.logging import configure_logging
from teamcode.database import init_db
from teamcode.routes import answer_routes, auth_routes, exercise_routes, team_routes, user_routes

configure_logging()
config.validate_runtime_config()

app = FastAPI(title='TeamCode API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'TeamCode API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(user_routes.router, prefix='/users')
app.include_router(team_routes.router, prefix='/teams')
app.include_router(exercise_routes.router, prefix='/exercises')
app.include_router(answer_routes.router, prefix='/answers')
