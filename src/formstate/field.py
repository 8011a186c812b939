"""
Field: one editable slot binding a raw string to a typed value.

Core Attributes:
- raw: Exactly what the user typed (source of truth)
- converter: Parse/format strategy for the value type
- touched: User edited the input since the last reset
- submit_attempted: A submit ran over this field since the last reset
- initial_raw: Raw text at the last reset (for unsaved-change checks)

Everything else is derived:
- status -> Empty | Valid(value) | Invalid(error), from raw + converter + config
- is_empty -> raw is the empty representation
- is_modified -> raw != initial_raw
- validation_error -> what a UI should display right now

Status policy for empty input:
    An empty raw string is Empty, never Invalid, so an untouched required
    field is not flagged before the user interacts. On submit an Empty field
    yields converter.parse(""): optional converters give None or a default,
    required ones raise RequiredError, which is then reported for the field.
"""

from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

from formstate.config import FormConfig, get_form_config
from formstate.converters import Converter
from formstate.errors import ParseError, UnknownPathError
from formstate.node import MISSING, FormNode
from formstate.path import FieldPath
from formstate.status import EMPTY, FieldStatus, Invalid, Valid

T = TypeVar('T')

_UNSET: Any = object()


class Field(FormNode, Generic[T]):
    """Leaf node holding raw input and its parse state."""

    def __init__(self, converter: Converter[T], value: Any = _UNSET):
        """
        Args:
            converter: Parse/format strategy for this field's value type
            value: Optional initial value, formatted into raw as by reset()
        """
        if not isinstance(converter, Converter):
            raise TypeError(f"Field needs a Converter, got {type(converter).__name__}")
        self.converter = converter
        self._raw = ''
        self._initial_raw = ''
        self._touched = False
        self._submit_attempted = False
        # (raw, config) -> status; never authoritative, recomputed on mismatch
        self._status_cache: Optional[Tuple[str, FormConfig, FieldStatus]] = None

        if value is not _UNSET:
            self.reset(value)

    def __repr__(self) -> str:
        return f"Field({self.converter.name}, raw={self._raw!r}, touched={self._touched})"

    # ==================== STATE ====================

    @property
    def raw(self) -> str:
        return self._raw

    @property
    def initial_raw(self) -> str:
        return self._initial_raw

    @property
    def touched(self) -> bool:
        return self._touched

    @property
    def submit_attempted(self) -> bool:
        return self._submit_attempted

    def set_input(self, raw: str) -> None:
        """Replace the raw input and mark the field touched.

        Never raises for bad input: parse failures show up in status().
        """
        if not isinstance(raw, str):
            raise TypeError(f"Raw input must be str, got {type(raw).__name__}")
        self._raw = raw
        self._touched = True
        self._status_cache = None

    def mark_submit_attempted(self) -> None:
        self._submit_attempted = True

    def reset(self, value: T) -> None:
        """Seed raw input from a typed value; does not count as a touch."""
        self._raw = self.converter.format(value)
        self._initial_raw = self._raw
        self._touched = False
        self._submit_attempted = False
        self._status_cache = None

    def clear(self) -> None:
        self._raw = ''
        self._initial_raw = ''
        self._touched = False
        self._submit_attempted = False
        self._status_cache = None

    # ==================== DERIVED ====================

    def _is_empty_raw(self, config: FormConfig) -> bool:
        if config.whitespace_is_empty:
            return not self._raw.strip()
        return self._raw == ''

    def is_empty(self) -> bool:
        return self._is_empty_raw(get_form_config())

    def is_modified(self) -> bool:
        return self._raw != self._initial_raw

    def status(self) -> FieldStatus:
        """Empty, Valid(value) or Invalid(error) for the current raw input."""
        config = get_form_config()
        cached = self._status_cache
        if cached is not None and cached[0] == self._raw and cached[1] == config:
            return cached[2]

        if self._is_empty_raw(config):
            status: FieldStatus = EMPTY
        else:
            try:
                status = Valid(self.converter.parse(self._raw))
            except ParseError as e:
                status = Invalid(e)
        self._status_cache = (self._raw, config, status)
        return status

    def _empty_result(self) -> Tuple[Any, Optional[ParseError]]:
        """What an Empty field contributes on submit: parse of the empty string."""
        try:
            return self.converter.parse(''), None
        except ParseError as e:
            return MISSING, e

    def result(self) -> Tuple[Any, Optional[ParseError]]:
        """(value, None) if this field can be submitted, else (MISSING, error)."""
        status = self.status()
        if isinstance(status, Valid):
            return status.value, None
        if isinstance(status, Invalid):
            return MISSING, status.error
        return self._empty_result()

    def validation_error(self) -> Optional[ParseError]:
        """Error a UI should display now, or None.

        - Invalid input shows once touched (if realtime validation is on) or
          after a submit attempt
        - Empty input shows the converter's empty error only after a submit
          attempt, never while the user is still filling in the form
        """
        status = self.status()
        if isinstance(status, Invalid):
            if self._submit_attempted or (self._touched and get_form_config().realtime_validation):
                return status.error
            return None
        if isinstance(status, Valid) or not self._submit_attempted:
            return None
        return self._empty_result()[1]

    # ==================== NODE HOOKS ====================

    def _resolve(self, path: FieldPath, at: FieldPath) -> FormNode:
        if path:
            raise UnknownPathError(FieldPath(at.segments + path.segments), f"{str(at)!r} is a leaf field")
        return self

    def _input_target(self) -> 'Field':
        return self

    def _evaluate(self, at: FieldPath, errors: Dict[FieldPath, ParseError], mark: bool, base: Any) -> Any:
        if mark:
            self.mark_submit_attempted()
        value, error = self.result()
        if error is not None:
            errors[at] = error
            return MISSING
        return value

    def _collect_status(self, at: FieldPath, out: Dict[FieldPath, FieldStatus]) -> None:
        out[at] = self.status()

    def _collect_visible_errors(self, at: FieldPath, out: Dict[FieldPath, ParseError]) -> None:
        error = self.validation_error()
        if error is not None:
            out[at] = error
