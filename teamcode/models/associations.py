"""Join tables for the many-to-many relations."""

from sqlalchemy import Column, ForeignKey, Integer, Table

from teamcode.database import Base


teams_users = Table(
    "teams_users",
    Base.metadata,
    Column("team_id", Integer, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

exercises_teams = Table(
    "exercises_teams",
    Base.metadata,
    Column("exercise_id", Integer, ForeignKey("exercises.id", ondelete="CASCADE"), primary_key=True),
    Column("team_id", Integer, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True),
)
