"""
Typed Exception Hierarchy for the Curation Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from LcmsKernelError:

    LcmsKernelError (base)
    |
    +-- CurationError
    |   +-- MalformedInputError
    |   +-- NotFoundError
    |   +-- InvalidValueError
    |   +-- PersistenceError
    |
    +-- ImmutabilityError
    |   +-- ImmutabilityViolationError
    |
    +-- ConfigError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Curation        | MALFORMED_INPUT             | Row lacks a usable result id / column
                | NOT_FOUND                   | Result or curation id doesn't exist
                | INVALID_VALUE               | Proposed ion not in the vocabulary
                | PERSISTENCE_FAILURE         | Store rejected a read or write
----------------|-----------------------------|-----------------------------------------
Immutability    | IMMUTABILITY_VIOLATION      | Modifying an append-only record
----------------|-----------------------------|-----------------------------------------
Config          | CONFIG_ERROR                | Configuration value is unusable

===============================================================================
HANDLING PATTERNS
===============================================================================

Every CurationError aborts the whole load. The reconciliation service turns
the first one it sees into a failed RowOutcome; the load runner rolls the
transaction back and the CLI reports it:

    result = load_service.run(rows, author="alice")
    if result.failure is not None:
        err = result.failure.error
        print(f"ERROR [{err.code}] row {err.source_row}: {err}")
        return 1

Catch by type, never by message text. Structured attributes (source_row,
result_id, value) survive logging and serialization; parsed strings don't.
"""


class LcmsKernelError(Exception):
    """
    Base exception for all curation kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LCMS_KERNEL_ERROR"


# Curation-run exceptions


class CurationError(LcmsKernelError):
    """Base exception for errors that abort a reconciliation run."""

    code: str = "CURATION_ERROR"

    def __init__(self, message: str, source_row: int | None = None):
        self.source_row = source_row
        super().__init__(message)


class MalformedInputError(CurationError):
    """An edit row could not be parsed (missing or non-numeric id, missing column)."""

    code: str = "MALFORMED_INPUT"

    def __init__(self, field: str, raw_value: str | None, reason: str, source_row: int | None = None):
        self.field = field
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(
            f"Malformed value for {field}: {raw_value!r} ({reason})",
            source_row=source_row,
        )


class NotFoundError(CurationError):
    """A referenced standard ion result or curated ion does not exist."""

    code: str = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int, source_row: int | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}", source_row=source_row)


class InvalidValueError(CurationError):
    """The proposed manual pick is not a recognized chemical ion name."""

    code: str = "INVALID_VALUE"

    def __init__(self, value: str, result_id: int | None = None, source_row: int | None = None):
        self.value = value
        self.result_id = result_id
        super().__init__(
            f"Found invalid chemical ion name: {value!r}",
            source_row=source_row,
        )


class PersistenceError(CurationError):
    """The underlying store rejected a read or write."""

    code: str = "PERSISTENCE_FAILURE"

    def __init__(self, operation: str, reason: str, result_id: int | None = None, source_row: int | None = None):
        self.operation = operation
        self.reason = reason
        self.result_id = result_id
        super().__init__(f"Could not {operation}: {reason}", source_row=source_row)


# Immutability-related exceptions


class ImmutabilityError(LcmsKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """
    Attempted to modify or delete an append-only record.

    Curated ions are immutable from creation; standard ion results only
    allow their manual override reference to move.
    """

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )


# Configuration exceptions


class ConfigError(LcmsKernelError):
    """A configuration value is missing or unusable."""

    code: str = "CONFIG_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration for {key}: {reason}")
