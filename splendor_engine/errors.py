# splendor_engine/errors.py

"""
Error types shared by the engine and its front ends.

Two kinds of failure exist:
- validation errors, returned as a ValidationResult carrying a reason the
  player can act on; they never touch the state.
- invariant violations, raised when a caller breaks the engine's contract
  (executing an unvalidated action, overdrawing a token pool, naming a tier
  that does not exist). These are programming errors, not player mistakes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    message: str = "OK"

    @classmethod
    def ok(cls) -> "ValidationResult":
        return _OK

    @classmethod
    def error(cls, message: str) -> "ValidationResult":
        return cls(is_valid=False, message=message)

    def __bool__(self) -> bool:
        return self.is_valid


_OK = ValidationResult(is_valid=True)


class SplendorError(Exception):
    """Base class for every error raised by this package."""


class ActionBuildError(SplendorError, ValueError):
    """A front end handed the action constructors malformed primitives."""


class InvariantViolation(SplendorError, RuntimeError):
    """The engine was driven outside its contract."""


class PhaseError(InvariantViolation):
    """A turn phase was skipped or taken out of order."""
