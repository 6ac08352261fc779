"""Database engine, session factory and schema bootstrap"""

import logging
from typing import Dict

from sqlalchemy import Table, create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create a sync engine for the given URL

    In-memory SQLite keeps one shared connection so tables survive between
    sessions; file databases open and close a connection per operation.
    """
    if database_url.startswith("sqlite"):
        in_memory = database_url in ("sqlite://", "sqlite:///:memory:")
        return create_engine(
            database_url,
            poolclass=StaticPool if in_memory else NullPool,
            connect_args={
                "check_same_thread": False,
            },
            echo=echo,
        )

    return create_engine(database_url, poolclass=NullPool, echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine"""
    return sessionmaker(bind=engine, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    """Create missing tables and bring older tables up to the current shape

    Safe to call repeatedly. A table lacking its primary key column is
    rebuilt with its rows copied across in their original order; other
    missing columns are added in place.
    """
    # Register models on Base.metadata
    from quickchat.infrastructure.database import models  # noqa: F401

    with engine.begin() as conn:
        renamed = _rename_tables_without_primary_key(conn)
        Base.metadata.create_all(bind=conn)
        for table_name, legacy_name in renamed.items():
            _copy_legacy_rows(conn, Base.metadata.tables[table_name], legacy_name)
        _add_missing_columns(conn)


def _rename_tables_without_primary_key(conn: Connection) -> Dict[str, str]:
    inspector = inspect(conn)
    existing_tables = set(inspector.get_table_names())
    renamed = {}

    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            continue

        existing = {column["name"] for column in inspector.get_columns(table.name)}
        if all(column.name in existing for column in table.primary_key.columns):
            continue

        legacy_name = f"{table.name}_legacy"
        conn.execute(text(f"ALTER TABLE {table.name} RENAME TO {legacy_name}"))
        renamed[table.name] = legacy_name
        logger.warning(f"Table {table.name} has no primary key column; rebuilding it")

    return renamed


def _copy_legacy_rows(conn: Connection, table: Table, legacy_name: str) -> None:
    legacy_columns = {column["name"] for column in inspect(conn).get_columns(legacy_name)}
    shared = ", ".join(column.name for column in table.columns if column.name in legacy_columns)
    order = " ORDER BY rowid" if conn.dialect.name == "sqlite" else ""

    result = conn.execute(
        text(f"INSERT INTO {table.name} ({shared}) SELECT {shared} FROM {legacy_name}{order}")
    )
    conn.execute(text(f"DROP TABLE {legacy_name}"))
    logger.info(f"Rebuilt table {table.name} with {result.rowcount} row(s)")


def _add_missing_columns(conn: Connection) -> None:
    inspector = inspect(conn)

    for table in Base.metadata.sorted_tables:
        existing = {column["name"] for column in inspector.get_columns(table.name)}

        for column in table.columns:
            if column.name in existing:
                continue

            column_type = column.type.compile(dialect=conn.dialect)
            conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {column.name} {column_type}"))
            logger.info(f"Added column {table.name}.{column.name}")
