"""
Module: lcms_kernel.db.triggers
Responsibility: Installing, removing and verifying the PostgreSQL triggers
    that keep the curation history append-only (Layer 2 of 2).  This is the
    database-level complement to the ORM listeners in db/immutability.py.
Architecture position: Kernel > DB.  MUST NOT import from models/, services/,
    selectors/, domain/, or outer layers.

Invariants enforced:
    - curated_standard_metlin_ions: no UPDATE, no DELETE.
    - standard_ion_results: analysis columns (chemical, standard_well_id,
      best_metlin_ion) never change.

Failure modes:
    - PostgreSQL RAISE EXCEPTION on any violation (surfaces as
      InternalError / IntegrityError through SQLAlchemy).
    - Only PostgreSQL is supported; callers check is_postgres() first.
"""

from sqlalchemy import text
from sqlalchemy.engine import Engine

from lcms_kernel.logging_config import get_logger

logger = get_logger("db.triggers")

ALL_TRIGGER_NAMES = (
    "trg_curated_ion_immutability_update",
    "trg_curated_ion_immutability_delete",
    "trg_standard_ion_result_analysis_update",
)

_INSTALL_SQL = (
    """
    CREATE OR REPLACE FUNCTION lcms_prevent_curated_ion_change() RETURNS trigger AS $$
    BEGIN
        RAISE EXCEPTION 'curated_standard_metlin_ions is append-only (% on id %)',
            TG_OP, OLD.id;
    END;
    $$ LANGUAGE plpgsql
    """,
    """
    CREATE OR REPLACE FUNCTION lcms_prevent_result_analysis_change() RETURNS trigger AS $$
    BEGIN
        IF NEW.chemical IS DISTINCT FROM OLD.chemical
           OR NEW.standard_well_id IS DISTINCT FROM OLD.standard_well_id
           OR NEW.best_metlin_ion IS DISTINCT FROM OLD.best_metlin_ion THEN
            RAISE EXCEPTION 'standard_ion_results analysis columns are read-only (id %)', OLD.id;
        END IF;
        RETURN NEW;
    END;
    $$ LANGUAGE plpgsql
    """,
    "DROP TRIGGER IF EXISTS trg_curated_ion_immutability_update ON curated_standard_metlin_ions",
    """
    CREATE TRIGGER trg_curated_ion_immutability_update
        BEFORE UPDATE ON curated_standard_metlin_ions
        FOR EACH ROW EXECUTE FUNCTION lcms_prevent_curated_ion_change()
    """,
    "DROP TRIGGER IF EXISTS trg_curated_ion_immutability_delete ON curated_standard_metlin_ions",
    """
    CREATE TRIGGER trg_curated_ion_immutability_delete
        BEFORE DELETE ON curated_standard_metlin_ions
        FOR EACH ROW EXECUTE FUNCTION lcms_prevent_curated_ion_change()
    """,
    "DROP TRIGGER IF EXISTS trg_standard_ion_result_analysis_update ON standard_ion_results",
    """
    CREATE TRIGGER trg_standard_ion_result_analysis_update
        BEFORE UPDATE ON standard_ion_results
        FOR EACH ROW EXECUTE FUNCTION lcms_prevent_result_analysis_change()
    """,
)

_DROP_SQL = (
    "DROP TRIGGER IF EXISTS trg_curated_ion_immutability_update ON curated_standard_metlin_ions",
    "DROP TRIGGER IF EXISTS trg_curated_ion_immutability_delete ON curated_standard_metlin_ions",
    "DROP TRIGGER IF EXISTS trg_standard_ion_result_analysis_update ON standard_ion_results",
    "DROP FUNCTION IF EXISTS lcms_prevent_curated_ion_change()",
    "DROP FUNCTION IF EXISTS lcms_prevent_result_analysis_change()",
)


def install_immutability_triggers(engine: Engine) -> None:
    """Install (or replace) all append-only triggers in one transaction."""
    with engine.begin() as conn:
        for statement in _INSTALL_SQL:
            conn.execute(text(statement))
    logger.info("immutability_triggers_installed", extra={"triggers": list(ALL_TRIGGER_NAMES)})


def uninstall_immutability_triggers(engine: Engine) -> None:
    """Remove all append-only triggers.  Tables may not exist yet."""
    with engine.begin() as conn:
        existing = {
            row[0]
            for row in conn.execute(
                text("SELECT tablename FROM pg_tables WHERE schemaname = current_schema()")
            )
        }
        for statement in _DROP_SQL:
            if " ON " in statement and statement.rsplit(" ", 1)[-1] not in existing:
                continue
            conn.execute(text(statement))


def installed_triggers(engine: Engine) -> set[str]:
    """Return the names of the append-only triggers currently installed."""
    with engine.connect() as conn:
        rows = conn.execute(
            text("SELECT tgname FROM pg_trigger WHERE tgname = ANY(:names)"),
            {"names": list(ALL_TRIGGER_NAMES)},
        )
        return {row[0] for row in rows}
