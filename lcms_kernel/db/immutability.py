"""
ORM-Level Immutability Enforcement (Layer 1 of 2).

===============================================================================
WHY THIS EXISTS
===============================================================================

The curation history is the record of every manual ion pick ever made. It is
append-only: a pick is superseded by inserting a newer curated ion and moving
the result's manual_override_id, never by editing or deleting the old row.

  Layer 1: THIS FILE (ORM event listeners)
    - Catches modifications through Python/SQLAlchemy code
    - Fires BEFORE the SQL is sent to the database

  Layer 2: db/triggers.py (PostgreSQL triggers)
    - Catches raw SQL, bulk UPDATE statements, direct psql access

===============================================================================
HOW IT WORKS
===============================================================================

    session.flush()
         |
         v
    [before_update event] --> _check_*_immutability() --> ImmutabilityViolationError
         |                                                        ^
         v                                                        |
    [before_delete event] --> _check_*_delete() -----------------+
         |
         v
    SQL sent to database (only if checks pass)

===============================================================================
PROTECTED ENTITIES
===============================================================================

Entity                      | When Immutable                    | Mutable fields
----------------------------|-----------------------------------|----------------------------
CuratedStandardMetlinIon    | ALWAYS (from creation)            | none
StandardIonResult           | Analysis fields always            | manual_override_id, version
StandardIonResult (DELETE)  | Once any curated ion references it| -

===============================================================================
USAGE
===============================================================================

    from lcms_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()  # Called once at startup

To temporarily disable (TESTS ONLY):

    unregister_immutability_listeners()
"""

from sqlalchemy import event, func, select
from sqlalchemy.orm.attributes import get_history

from lcms_kernel.exceptions import ImmutabilityViolationError
from lcms_kernel.logging_config import get_logger

logger = get_logger("db.immutability")

# Fields written by upstream analysis; frozen for this system.
RESULT_ANALYSIS_FIELDS = frozenset({"chemical", "standard_well_id", "best_metlin_ion"})


def _blocked(entity_type: str, entity_id, operation: str, reason: str) -> ImmutabilityViolationError:
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": entity_type,
            "entity_id": str(entity_id),
            "operation": operation,
        },
    )
    return ImmutabilityViolationError(
        entity_type=entity_type,
        entity_id=str(entity_id),
        reason=reason,
    )


def _check_curated_ion_immutability(mapper, connection, target):
    """Prevent any updates to curated ions."""
    raise _blocked(
        "CuratedStandardMetlinIon",
        target.id,
        "UPDATE",
        "Curated ions are append-only and cannot be modified",
    )


def _check_curated_ion_delete(mapper, connection, target):
    """Prevent deletion of curated ions."""
    raise _blocked(
        "CuratedStandardMetlinIon",
        target.id,
        "DELETE",
        "Curated ions are append-only and cannot be deleted",
    )


def _check_result_analysis_immutability(mapper, connection, target):
    """
    Allow only the manual override reference of a result to change.

    Uses attribute history: ``deleted`` holds the loaded value when the
    attribute was reassigned during this unit of work.
    """
    changed = sorted(
        name for name in RESULT_ANALYSIS_FIELDS
        if get_history(target, name).deleted
    )
    if changed:
        raise _blocked(
            "StandardIonResult",
            target.id,
            "UPDATE",
            f"Analysis fields are read-only: {', '.join(changed)}",
        )


def _result_has_curations(connection, result_id: int) -> bool:
    from lcms_kernel.models.curated_metlin_ion import CuratedStandardMetlinIon

    count = connection.execute(
        select(func.count())
        .select_from(CuratedStandardMetlinIon)
        .where(CuratedStandardMetlinIon.standard_ion_result_id == result_id)
    ).scalar_one()
    return count > 0


def _check_result_delete(mapper, connection, target):
    """Prevent deleting a result that already has curation history."""
    if _result_has_curations(connection, target.id):
        raise _blocked(
            "StandardIonResult",
            target.id,
            "DELETE",
            "Results with curation history cannot be deleted",
        )


def register_immutability_listeners():
    """
    Register all immutability enforcement event listeners.

    Call this after all models are imported but before any database
    operations begin.  Registering twice is harmless.
    """
    from lcms_kernel.models.curated_metlin_ion import CuratedStandardMetlinIon
    from lcms_kernel.models.standard_ion_result import StandardIonResult

    listeners = (
        (CuratedStandardMetlinIon, "before_update", _check_curated_ion_immutability),
        (CuratedStandardMetlinIon, "before_delete", _check_curated_ion_delete),
        (StandardIonResult, "before_update", _check_result_analysis_immutability),
        (StandardIonResult, "before_delete", _check_result_delete),
    )
    for target, event_name, listener_fn in listeners:
        if not event.contains(target, event_name, listener_fn):
            event.listen(target, event_name, listener_fn)


def _safe_remove_listener(target, event_name, listener_fn):
    """Safely remove an event listener, ignoring if not registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove immutability enforcement event listeners.

    WARNING: Only use this in tests where you need to intentionally
    violate immutability rules to verify detection.
    """
    from lcms_kernel.models.curated_metlin_ion import CuratedStandardMetlinIon
    from lcms_kernel.models.standard_ion_result import StandardIonResult

    _safe_remove_listener(CuratedStandardMetlinIon, "before_update", _check_curated_ion_immutability)
    _safe_remove_listener(CuratedStandardMetlinIon, "before_delete", _check_curated_ion_delete)
    _safe_remove_listener(StandardIonResult, "before_update", _check_result_analysis_immutability)
    _safe_remove_listener(StandardIonResult, "before_delete", _check_result_delete)
