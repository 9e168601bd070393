"""
Database-level append-only enforcement (PostgreSQL triggers).

Raw SQL bypasses the ORM listeners, so these checks exercise the triggers
alone.  Skipped unless DATABASE_URL points at PostgreSQL.
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from lcms_kernel.db.triggers import (
    ALL_TRIGGER_NAMES,
    install_immutability_triggers,
    installed_triggers,
    uninstall_immutability_triggers,
)
from lcms_kernel.services.curation_store import CurationStore
from lcms_kernel.services.result_store import ResultStore

pytestmark = pytest.mark.postgres


@pytest.fixture
def pg_engine(db_engine):
    if db_engine.dialect.name != "postgresql":
        pytest.skip("Requires PostgreSQL")
    return db_engine


@pytest.fixture
def curated(pg_engine, session, make_result, deterministic_clock):
    """Result 42 pointing at one committed curated ion; returns the curation id."""
    result = make_result(result_id=42)
    curation = CurationStore(session).insert_curation(
        author="alice",
        created_at=deterministic_clock.now_utc(),
        best_metlin_ion="M+H",
        note=None,
        result_id=42,
    )
    ResultStore(session).set_manual_override(result, curation.id)
    session.commit()
    return curation.id


def test_create_tables_installs_all_triggers(pg_engine):
    assert installed_triggers(pg_engine) == set(ALL_TRIGGER_NAMES)


def test_install_is_repeatable(pg_engine):
    install_immutability_triggers(pg_engine)
    install_immutability_triggers(pg_engine)
    assert installed_triggers(pg_engine) == set(ALL_TRIGGER_NAMES)


def test_raw_update_of_curated_ion_rejected(pg_engine, curated):
    with pytest.raises(DBAPIError, match="append-only"):
        with pg_engine.begin() as conn:
            conn.execute(
                text("UPDATE curated_standard_metlin_ions SET best_metlin_ion = 'M+Na' WHERE id = :id"),
                {"id": curated},
            )

    with pg_engine.connect() as conn:
        value = conn.execute(
            text("SELECT best_metlin_ion FROM curated_standard_metlin_ions WHERE id = :id"),
            {"id": curated},
        ).scalar_one()
    assert value == "M+H"


def test_raw_delete_of_curated_ion_rejected(pg_engine, curated):
    with pytest.raises(DBAPIError, match="append-only"):
        with pg_engine.begin() as conn:
            conn.execute(text("UPDATE standard_ion_results SET manual_override_id = NULL WHERE id = 42"))
            conn.execute(
                text("DELETE FROM curated_standard_metlin_ions WHERE id = :id"),
                {"id": curated},
            )

    with pg_engine.connect() as conn:
        count = conn.execute(text("SELECT count(*) FROM curated_standard_metlin_ions")).scalar_one()
    assert count == 1


def test_raw_update_of_analysis_column_rejected(pg_engine, curated):
    with pytest.raises(DBAPIError, match="read-only"):
        with pg_engine.begin() as conn:
            conn.execute(text("UPDATE standard_ion_results SET chemical = 'theine' WHERE id = 42"))


def test_override_move_allowed(pg_engine, curated):
    with pg_engine.begin() as conn:
        conn.execute(text("UPDATE standard_ion_results SET manual_override_id = NULL WHERE id = 42"))
        override = conn.execute(
            text("SELECT manual_override_id FROM standard_ion_results WHERE id = 42")
        ).scalar_one()
    assert override is None


def test_uninstall_removes_triggers(pg_engine, curated):
    uninstall_immutability_triggers(pg_engine)
    assert installed_triggers(pg_engine) == set()

    with pg_engine.begin() as conn:
        conn.execute(
            text("UPDATE curated_standard_metlin_ions SET note = 'fixed' WHERE id = :id"),
            {"id": curated},
        )
