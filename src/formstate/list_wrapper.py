"""
ListWrapper: a dynamically sized, reorderable list of form entries.

Entries are cloned from a prototype node (Aggregate or Field) and identified
by ItemKey, never by position:

    addresses = ListWrapper(Aggregate({'city': Field(converters.text())}))
    k1 = addresses.add()
    k2 = addresses.add({'city': 'Oslo'})
    addresses.reorder([k2, k1])     # k1 still names the same entry
    addresses.remove(k1)            # paths naming k1 now raise UnknownKeyError

Key Invariants:
- Keys come from a per-list counter and are never reused, even after
  remove() or clear()
- Reorder is all-or-nothing: a non-permutation leaves the list untouched
- Item paths are the list's path with its last segment keyed,
  e.g. addresses[2].city
"""

import copy
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, TYPE_CHECKING

from formstate.errors import InvalidReorderError, ParseError, UnknownKeyError, UnknownPathError
from formstate.node import MISSING, FormNode
from formstate.path import FieldPath, ItemKey

if TYPE_CHECKING:
    from formstate.field import Field
    from formstate.status import FieldStatus

logger = logging.getLogger(__name__)


class ListWrapper(FormNode):
    """Ordered (ItemKey, node) entries built from a prototype."""

    wrappable = False

    def __init__(self, prototype: FormNode):
        """
        Args:
            prototype: Aggregate or Field each new entry is deep-copied from
        """
        if not isinstance(prototype, FormNode) or not prototype.wrappable:
            raise TypeError(
                f"ListWrapper prototype must be an Aggregate or Field, got {type(prototype).__name__}"
            )
        self.prototype = prototype
        self._items: Dict[ItemKey, FormNode] = {}
        self._next_serial = 1

    def __repr__(self) -> str:
        return f"ListWrapper({self.prototype!r}, keys={[str(k) for k in self._items]})"

    # ==================== ITEMS ====================

    def keys(self) -> List[ItemKey]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Tuple[ItemKey, FormNode]]:
        return iter(list(self._items.items()))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def item(self, key: ItemKey) -> FormNode:
        """Return the entry for ``key``.

        Raises:
            UnknownKeyError: The key was never issued here or its entry is gone
        """
        node = self._items.get(key)
        if node is None:
            raise UnknownKeyError(FieldPath(), key)
        return node

    def index_of(self, key: ItemKey) -> int:
        """Current position of the entry for ``key``."""
        self.item(key)
        return list(self._items).index(key)

    def add(self, initial: Any = None) -> ItemKey:
        """Append a fresh entry, optionally seeded from a model value, and return its key."""
        node = copy.deepcopy(self.prototype)
        node.clear()
        if initial is not None:
            node.reset(initial)
        key = ItemKey(self._next_serial)
        self._next_serial += 1
        self._items[key] = node
        logger.debug(f"List item {key} added ({len(self._items)} items)")
        return key

    def remove(self, key: ItemKey) -> None:
        """Drop the entry for ``key``; its key is retired for good."""
        if key not in self._items:
            logger.warning(f"Cannot remove unknown list item {key}")
            raise UnknownKeyError(FieldPath(), key)
        del self._items[key]
        logger.debug(f"List item {key} removed ({len(self._items)} items)")

    def reorder(self, order: Sequence[ItemKey]) -> None:
        """Put entries in the given key order.

        Raises:
            InvalidReorderError: ``order`` is not a permutation of the current keys
        """
        order = list(order)
        current = list(self._items)
        if len(order) != len(current) or set(order) != set(current):
            logger.warning(f"Rejected reorder {[str(k) for k in order]}")
            raise InvalidReorderError(current, order)
        self._items = {key: self._items[key] for key in order}
        logger.debug(f"List reordered to {[str(k) for k in order]}")

    # ==================== STATE ====================

    def reset(self, values: Any) -> None:
        """Rebuild the entries from a model list; every entry gets a fresh key."""
        self._items = {}
        for value in values or ():
            self.add(value)

    def clear(self) -> None:
        self._items = {}

    def is_empty(self) -> bool:
        return all(node.is_empty() for node in self._items.values())

    # ==================== NODE HOOKS ====================

    def _resolve(self, path: FieldPath, at: FieldPath) -> FormNode:
        if not path:
            return self
        raise UnknownPathError(FieldPath(at.segments + path.segments), "list entries need an item key")

    def _resolve_item(self, key: ItemKey, path: FieldPath, at: FieldPath) -> FormNode:
        """Resolve ``path`` inside the entry for ``key``; ``at`` is this list's path."""
        node = self._items.get(key)
        if node is None:
            raise UnknownKeyError(at.with_key(key), key)
        return node._resolve(path, at.with_key(key))

    def _input_target(self) -> Optional['Field']:
        return None

    def _evaluate(self, at: FieldPath, errors: Dict[FieldPath, ParseError], mark: bool, base: Any) -> Any:
        values = [
            node._evaluate(at.with_key(key), errors, mark, None)
            for key, node in self._items.items()
        ]
        if any(v is MISSING for v in values):
            return MISSING
        return values

    def _collect_status(self, at: FieldPath, out: Dict[FieldPath, 'FieldStatus']) -> None:
        for key, node in self._items.items():
            node._collect_status(at.with_key(key), out)

    def _collect_visible_errors(self, at: FieldPath, out: Dict[FieldPath, ParseError]) -> None:
        for key, node in self._items.items():
            node._collect_visible_errors(at.with_key(key), out)
