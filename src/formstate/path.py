"""
Field identifiers for routing updates through a form tree.

A FieldPath names exactly one node inside a (possibly nested) form:

    FieldPath.of("username")                          -> username
    FieldPath.of("primary_address", "city")           -> primary_address.city
    FieldPath.of(("addresses", key), "city")          -> addresses[3].city

Plain segments are field names. Item segments pair the name of a list field
with the ItemKey of one of its entries. Keys, not positions, identify list
entries, so a path built before a reorder still names the same entry after it.

Paths are immutable and hashable, so they work as dict keys for
error mappings and status snapshots.
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union


@dataclass(frozen=True, order=True)
class ItemKey:
    """Opaque identity of one list entry.

    Issued by ListWrapper from a per-list monotonic counter and never reused,
    so a key kept from a removed entry can never alias a newer one.
    """
    serial: int

    def __str__(self) -> str:
        return str(self.serial)


@dataclass(frozen=True, order=True)
class ItemSegment:
    """Path segment addressing one entry of a list field."""
    name: str
    key: ItemKey

    def __str__(self) -> str:
        return f"{self.name}[{self.key}]"


Segment = Union[str, ItemSegment]

_SEGMENT_RE = re.compile(r'^(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:\[(?P<key>\d+)\])?$')


def _coerce_segment(segment) -> Segment:
    if isinstance(segment, ItemSegment):
        return segment
    if isinstance(segment, str):
        if not segment:
            raise ValueError("Path segments must be non-empty field names")
        return segment
    if isinstance(segment, tuple) and len(segment) == 2:
        name, key = segment
        if isinstance(key, int) and not isinstance(key, bool):
            key = ItemKey(key)
        if not isinstance(name, str) or not isinstance(key, ItemKey):
            raise TypeError(f"Item segment must be (field name, ItemKey), got {segment!r}")
        return ItemSegment(name, key)
    raise TypeError(f"Unsupported path segment: {segment!r}")


@dataclass(frozen=True)
class FieldPath:
    """Ordered sequence of segments identifying one node of a form."""
    segments: Tuple[Segment, ...] = ()

    @classmethod
    def of(cls, *segments) -> 'FieldPath':
        """Build a path from names and (name, key) pairs."""
        return cls(tuple(_coerce_segment(s) for s in segments))

    @classmethod
    def parse(cls, text: str) -> 'FieldPath':
        """Parse the dotted rendering produced by str(path).

        >>> str(FieldPath.parse("addresses[3].city"))
        'addresses[3].city'
        """
        if not text:
            return cls()
        segments = []
        for part in text.split('.'):
            match = _SEGMENT_RE.match(part)
            if match is None:
                raise ValueError(f"Malformed field path {text!r} at {part!r}")
            name, key = match.group('name'), match.group('key')
            segments.append(ItemSegment(name, ItemKey(int(key))) if key is not None else name)
        return cls(tuple(segments))

    @property
    def head(self) -> Optional[Segment]:
        return self.segments[0] if self.segments else None

    @property
    def tail(self) -> 'FieldPath':
        return FieldPath(self.segments[1:])

    def child(self, segment) -> 'FieldPath':
        """Return this path extended by one segment."""
        return FieldPath(self.segments + (_coerce_segment(segment),))

    def with_key(self, key: ItemKey) -> 'FieldPath':
        """Return this path with its last segment narrowed to one list entry."""
        last = self.segments[-1] if self.segments else None
        if not isinstance(last, str):
            raise ValueError(f"Cannot address a list entry below {str(self)!r}")
        return FieldPath(self.segments[:-1] + (ItemSegment(last, key),))

    def __truediv__(self, segment) -> 'FieldPath':
        return self.child(segment)

    def __bool__(self) -> bool:
        return bool(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __str__(self) -> str:
        return '.'.join(str(s) for s in self.segments)

    def __repr__(self) -> str:
        return f"FieldPath({str(self)!r})"


def segment_name(segment: Segment) -> str:
    """Field name a segment refers to, ignoring any item key."""
    return segment.name if isinstance(segment, ItemSegment) else segment
