"""
Module: lcms_kernel.db.engine
Responsibility: The process-wide engine and session factory used by the
    loader and exporter, plus table management for the two curation tables.
Architecture position: Kernel > DB.  May import from db/base.py and
    db/triggers.py; create_tables/drop_tables import models to populate
    metadata.

Invariants enforced:
    - PostgreSQL (psycopg2) runs at READ COMMITTED behind a pre-pinging
      QueuePool.  The loader's version check on standard_ion_results, not
      the isolation level, is what catches concurrent curators.
    - In-memory SQLite shares one connection (StaticPool) so every session
      of a run sees the same tables.
    - Sessions never expire on commit so snapshots built after commit stay
      readable.

Failure modes:
    - RuntimeError when used before init_engine_from_url().
    - OperationalError if the database is unreachable (raised lazily, on the
      first statement).
"""

import atexit
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from lcms_kernel.logging_config import configure_logging, get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None

_NOT_INITIALIZED = "Engine not initialized. Call init_engine_from_url() first."


def _is_memory_sqlite(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


def _engine_options(url: URL, pool_options: dict[str, Any]) -> dict[str, Any]:
    """Pool and isolation settings for the backend named by ``url``."""
    if url.get_backend_name() == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            options["poolclass"] = StaticPool
        return options
    return {
        "poolclass": QueuePool,
        "isolation_level": "READ COMMITTED",
        **pool_options,
    }


def init_engine_from_url(
    database_url: str,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10,
    pool_pre_ping: bool = True,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
) -> Engine:
    """
    Create the engine and session factory, replacing any earlier ones.

    Pool settings apply to server databases only; SQLite ignores them.
    """
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()

    url = make_url(database_url)
    _engine = create_engine(
        url,
        echo=echo,
        **_engine_options(
            url,
            {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_pre_ping": pool_pre_ping,
                "pool_timeout": pool_timeout,
                "pool_recycle": pool_recycle,
            },
        ),
    )
    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)

    configure_logging()
    logger.info(
        "engine_initialized",
        extra={
            "dialect": _engine.dialect.name,
            "database": url.database,
            "shared_connection": _is_memory_sqlite(url),
            "echo": echo,
        },
    )
    return _engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """The factory LoadService opens its run session from."""
    if _SessionFactory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _SessionFactory


def get_session() -> Session:
    return get_session_factory()()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """
    Commit on normal exit, roll back and re-raise on error, always close.

    For short maintenance work; a curation load manages its own transaction
    through LoadService.
    """
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("transaction_rolled_back", extra={"reason": "exception"}, exc_info=True)
        raise
    finally:
        session.close()


def is_postgres() -> bool:
    return _engine is not None and _engine.dialect.name == "postgresql"


def create_tables(install_triggers: bool = True) -> None:
    """
    Create standard_ion_results and curated_standard_metlin_ions.

    On PostgreSQL the append-only triggers are installed as well unless
    ``install_triggers`` is False.
    """
    from lcms_kernel.db.base import Base
    import lcms_kernel.models  # noqa: F401  (populates Base.metadata)

    engine = get_engine()
    Base.metadata.create_all(engine)
    logger.info("tables_created", extra={"tables": sorted(Base.metadata.tables)})

    if install_triggers and is_postgres():
        from lcms_kernel.db.triggers import install_immutability_triggers

        install_immutability_triggers(engine)


def drop_tables() -> None:
    """Drop both curation tables (and their triggers). For tests and resets."""
    from lcms_kernel.db.base import Base
    import lcms_kernel.models  # noqa: F401

    engine = get_engine()
    if is_postgres():
        from lcms_kernel.db.triggers import uninstall_immutability_triggers

        uninstall_immutability_triggers(engine)
    Base.metadata.drop_all(engine)


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None


@atexit.register
def _dispose_on_exit() -> None:
    if _engine is not None:
        _engine.dispose()
