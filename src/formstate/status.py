"""
Typed status values for fields and whole forms.

Design Philosophy: Correct by Construction
- Field status is one of exactly three frozen cases: Empty, Valid, Invalid
- SubmitResult is either a model or a non-empty error mapping, never both
- Results are immutable once returned (errors exposed as a read-only mapping)
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar, Union

from formstate.errors import ParseError, SubmitError
from formstate.path import FieldPath

T = TypeVar('T')


@dataclass(frozen=True)
class Empty:
    """Raw input is the empty representation; nothing was parsed yet."""

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def is_invalid(self) -> bool:
        return False


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Raw input parsed successfully."""
    value: T

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def is_invalid(self) -> bool:
        return False


@dataclass(frozen=True)
class Invalid:
    """Raw input failed to parse."""
    error: ParseError

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def is_invalid(self) -> bool:
        return True


FieldStatus = Union[Empty, Valid, Invalid]

EMPTY = Empty()


@dataclass(frozen=True)
class SubmitResult(Generic[T]):
    """Outcome of validating a whole form: the model, or every field error.

    Use the constructors rather than building instances directly:
        SubmitResult.success(model)
        SubmitResult.failure({path: error, ...})
    """
    value: Optional[T] = None
    errors: Mapping[FieldPath, ParseError] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def success(cls, value: T) -> 'SubmitResult[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, errors: Mapping[FieldPath, ParseError]) -> 'SubmitResult[T]':
        if not errors:
            raise ValueError("A failed SubmitResult needs at least one error")
        return cls(errors=MappingProxyType(dict(errors)))

    @property
    def ok(self) -> bool:
        return not self.errors

    def unwrap(self) -> T:
        """Return the model, or raise SubmitError carrying every field error."""
        if self.errors:
            raise SubmitError(self.errors)
        return self.value

    def error_for(self, path: FieldPath) -> Optional[ParseError]:
        return self.errors.get(path)

    def error_messages(self) -> Dict[str, str]:
        """Rendered path -> display message, in traversal order."""
        return {str(path): str(err) for path, err in self.errors.items()}

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SubmitResult):
            return NotImplemented
        return self.value == other.value and dict(self.errors) == dict(other.errors)

    def __hash__(self) -> int:
        return hash((type(self), tuple(self.errors.items())))

    def __repr__(self) -> str:
        if self.ok:
            return f"SubmitResult.success({self.value!r})"
        rendered = {str(p): e for p, e in self.errors.items()}
        return f"SubmitResult.failure({rendered!r})"
