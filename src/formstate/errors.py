"""
Error taxonomy for the form-state engine.

Two families with different propagation rules:

Value-level (ParseError and subclasses):
- Raised by converters, caught by Field and folded into its status
- Never fatal: the user edits the input and submits again
- Compared by type and arguments, so repeated submits give equal results

Structural (UnknownPathError, UnknownKeyError, InvalidReorderError):
- Signal a bug in the caller or binding layer (stale or malformed identifier)
- Raised to the immediate caller and never swallowed by the engine
"""

from typing import Any, Dict, Mapping, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from formstate.path import FieldPath


class ParseError(ValueError):
    """Base class for errors produced while parsing raw input.

    str(error) is the message a UI shows next to the input.
    """

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    def __repr__(self) -> str:
        args = ', '.join(repr(a) for a in self.args)
        return f"{type(self).__name__}({args})"


class RequiredError(ParseError):
    """The input is empty but the converter needs a value."""

    def __init__(self) -> None:
        super().__init__()

    def __str__(self) -> str:
        return "This field is required."


class InvalidFormatError(ParseError):
    """The input could not be read as the expected type at all."""

    def __init__(self, required_type: str) -> None:
        super().__init__(required_type)
        self.required_type = required_type

    def __str__(self) -> str:
        return f"Expected {self.required_type}."


class ConversionError(ParseError):
    """The input was read, but converting it to the model type failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.message.rstrip('.')}."


class NumberOutOfRangeError(ParseError):
    """A numeric input is not a number within the allowed bounds.

    Unbounded sides are stored as empty strings and left out of the message.
    """

    def __init__(self, required_type: str, min: Any = None, max: Any = None) -> None:
        min = '' if min is None else str(min)
        max = '' if max is None else str(max)
        super().__init__(required_type, min, max)
        self.required_type = required_type
        self.min = min
        self.max = max

    def __str__(self) -> str:
        if self.min and self.max:
            return f"Expected {self.required_type} between {self.min} and {self.max}."
        if self.min:
            return f"Expected {self.required_type} of at least {self.min}."
        if self.max:
            return f"Expected {self.required_type} of at most {self.max}."
        return f"Expected {self.required_type}."


class UnknownPathError(LookupError):
    """A FieldPath does not name a node of the form it was sent to."""

    def __init__(self, path: 'FieldPath', reason: str = "") -> None:
        message = f"Unknown field path {str(path)!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return self.args[0]


class UnknownKeyError(UnknownPathError):
    """A list item key was never issued by this list, or its item was removed.

    Raised with an empty path when the list is used directly rather than
    through a form; the message then names the key alone.
    """

    def __init__(self, path: 'FieldPath', key: Any) -> None:
        super().__init__(path, f"no list item with key {key}")
        self.key = key
        if not path:
            self.args = (f"No list item with key {key}",)


class InvalidReorderError(ValueError):
    """A reorder request is not a permutation of the current item keys."""

    def __init__(self, current: Sequence[Any], requested: Sequence[Any]) -> None:
        super().__init__(
            f"Reorder must be a permutation of the current keys "
            f"{[str(k) for k in current]}, got {[str(k) for k in requested]}"
        )
        self.current = tuple(current)
        self.requested = tuple(requested)


class SubmitError(ValueError):
    """Raised by SubmitResult.unwrap() when the submit failed."""

    def __init__(self, errors: Mapping['FieldPath', ParseError]) -> None:
        self.errors: Dict['FieldPath', ParseError] = dict(errors)
        summary = ', '.join(f"{str(path) or '<form>'}: {err}" for path, err in self.errors.items())
        super().__init__(f"Form has {len(self.errors)} invalid field(s): {summary}")
