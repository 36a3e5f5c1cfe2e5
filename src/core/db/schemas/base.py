"""
SQLAlchemy declarative base for the trip history tables.

The ORM classes only describe the schema for Alembic; reads and writes go
through the psycopg stores in core.db.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention={"ck": "chk_%(table_name)s_%(constraint_name)s"})
