"""
aiie_engine/exceptions.py
=========================
Custom exception hierarchy for the AIIE scoring engine.

Exception Tree::

    AIIEEngineError (base)
    ├── InvalidClinicalInputError
    ├── InvalidModalityError
    └── AssessmentValidationError

Only *validation* failures are raised.  Degraded data (an unknown
modality, missing case metadata, a zero-question assessment) is
absorbed by the services with well-defined fallback values.
"""

from __future__ import annotations


class AIIEEngineError(Exception):
    """Base exception for all AIIE engine errors.

    All domain-specific exceptions raised within the service layer
    inherit from this class so callers can catch them uniformly.

    Attributes:
        message: Human-readable error description.
        details: Optional dict with structured error context.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message: str = message
        self.details: dict = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class InvalidClinicalInputError(AIIEEngineError):
    """Raised when a clinical input snapshot is malformed or out of range.

    Attributes:
        field: Name of the offending field.
        value: The rejected value.
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field: str = field
        self.value: object = value
        super().__init__(
            message=f"Invalid clinical input for {field!r}: {reason}",
            details={"field": field, "value": repr(value), "reason": reason},
        )


class InvalidModalityError(AIIEEngineError):
    """Raised when a modality identifier or its attributes are invalid.

    An *unknown* but well-formed modality is not an error; see
    :class:`RuleBasedScoringStrategy`.
    """

    def __init__(self, modality: object, reason: str) -> None:
        self.modality: object = modality
        super().__init__(
            message=f"Invalid modality {modality!r}: {reason}",
            details={"modality": repr(modality), "reason": reason},
        )


class AssessmentValidationError(AIIEEngineError):
    """Raised when assessment scoring arguments are out of range."""

    def __init__(self, field: str, value: object) -> None:
        self.field: str = field
        self.value: object = value
        super().__init__(
            message=f"Invalid assessment argument {field!r}: {value!r}",
            details={"field": field, "value": repr(value)},
        )
