"""
Converters: parse/format strategies between raw strings and typed values.

A Converter is a pure pair of functions:
- parse(raw) -> value, raising ParseError when the raw text is unusable
- format(value) -> raw, chosen so that parse(format(v)) == v

The engine core never picks converters; callers supply one per field. The
factories below cover the common cases and are entirely optional:

    text()                       str, trimmed, required
    text(int, "a number")        trimmed, built with int(), InvalidFormatError on failure
    password()                   str, not trimmed, required
    number(int, "a port", 1, 65535)
    number_with_default(int)     empty input parses to int() == 0
    optional(text(int))          empty input parses to None
    delimited(text(int))         "1, 2, 3" <-> [1, 2, 3]
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

from formstate.errors import (
    ConversionError,
    InvalidFormatError,
    NumberOutOfRangeError,
    ParseError,
    RequiredError,
)

T = TypeVar('T')


@dataclass(frozen=True)
class Converter(Generic[T]):
    """Parse/format pair for one value type.

    Attributes:
        parse: Raw string -> value. Must signal bad input with ParseError;
            any other exception is treated as a bug and propagates out of
            Field.status(), submit() and status_snapshot(). Wrap plain
            constructors with text() or number() to get ParseError.
        format: Value -> raw string.
        name: Human-readable type name, used in error messages and reprs.
    """
    parse: Callable[[str], T]
    format: Callable[[T], str]
    name: str = "value"

    def __repr__(self) -> str:
        return f"Converter({self.name})"


def _required(raw: str, strip: bool) -> str:
    value = raw.strip() if strip else raw
    if not value:
        raise RequiredError()
    return value


def _wrap_constructor(constructor: Callable[[str], T], type_name: Optional[str]) -> Callable[[str], T]:
    """Turn ValueError/TypeError from a constructor into ParseError."""
    def convert(value: str) -> T:
        try:
            return constructor(value)
        except ParseError:
            raise
        except (ValueError, TypeError) as e:
            if type_name is not None:
                raise InvalidFormatError(type_name) from e
            raise ConversionError(str(e)) from e
    return convert


def text(
    constructor: Callable[[str], T] = str,
    type_name: Optional[str] = None,
    strip: bool = True,
    formatter: Callable[[T], str] = str,
) -> Converter[T]:
    """Required text input parsed with ``constructor``.

    Args:
        constructor: Callable building the value from the (trimmed) text,
            e.g. ``int``, ``ipaddress.ip_address``, ``Decimal``.
        type_name: When given, construction failures become
            ``InvalidFormatError(type_name)``; otherwise ``ConversionError``
            with the constructor's own message.
        strip: Trim surrounding whitespace before parsing.
        formatter: Value -> text, ``str`` by default.
    """
    convert = _wrap_constructor(constructor, type_name)

    def parse(raw: str) -> T:
        return convert(_required(raw, strip))

    name = type_name or getattr(constructor, '__name__', 'value')
    return Converter(parse=parse, format=formatter, name=name)


def password() -> Converter[str]:
    """Required string kept exactly as typed (no trimming)."""
    return text(str, strip=False)


def number(
    numeric_type: Callable[[str], T] = int,
    type_name: str = "a number",
    min: Optional[Any] = None,
    max: Optional[Any] = None,
    via: Optional[Callable[[str], Any]] = None,
) -> Converter[T]:
    """Required numeric input with optional bounds.

    Text that is not a number, or falls outside [min, max], raises
    NumberOutOfRangeError carrying the bounds so the message can show them.
    When ``via`` is given the text is first parsed with it and the result
    handed to ``numeric_type`` (e.g. ``via=int`` into a ``Port`` type whose
    constructor enforces its own rules); errors from that second step become
    ConversionError with the constructor's message.
    """
    underlying = via or numeric_type

    def out_of_range() -> NumberOutOfRangeError:
        return NumberOutOfRangeError(type_name, min, max)

    def parse_number(trimmed: str) -> T:
        try:
            parsed = underlying(trimmed)
        except (ValueError, TypeError) as e:
            raise out_of_range() from e
        if (min is not None and parsed < min) or (max is not None and parsed > max):
            raise out_of_range()
        if via is None:
            return parsed
        return _wrap_constructor(numeric_type, None)(parsed)

    def parse(raw: str) -> T:
        return parse_number(_required(raw, True))

    return Converter(parse=parse, format=str, name=type_name)


def number_with_default(
    numeric_type: Callable[..., T] = int,
    type_name: str = "a number",
    min: Optional[Any] = None,
    max: Optional[Any] = None,
) -> Converter[T]:
    """Numeric input where empty text parses to ``numeric_type()`` (e.g. 0)."""
    inner = number(numeric_type, type_name, min, max)

    def parse(raw: str) -> T:
        if not raw.strip():
            return numeric_type()
        return inner.parse(raw)

    return Converter(parse=parse, format=inner.format, name=inner.name)


def optional(inner: Converter[T]) -> Converter[Optional[T]]:
    """Wrap a converter so empty input means None instead of RequiredError."""

    def parse(raw: str) -> Optional[T]:
        if not raw.strip():
            return None
        return inner.parse(raw)

    def format(value: Optional[T]) -> str:
        return '' if value is None else inner.format(value)

    return Converter(parse=parse, format=format, name=f"optional {inner.name}")


def delimited(inner: Converter[T], separator: str = ',') -> Converter[List[T]]:
    """Separator-joined list of values; empty input is an empty list.

    Not suitable when values may themselves contain the separator.
    """

    def parse(raw: str) -> List[T]:
        parts = (p.strip() for p in raw.strip().split(separator))
        return [inner.parse(p) for p in parts if p]

    def format(values: List[T]) -> str:
        return f"{separator} ".join(inner.format(v) for v in values)

    return Converter(parse=parse, format=format, name=f"list of {inner.name}")


def identity() -> Converter[str]:
    """Any string, including the empty one, taken verbatim."""
    return Converter(parse=str, format=str, name="text")
