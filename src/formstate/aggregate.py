"""
Aggregate: a named, ordered collection of form nodes that builds one model.

An Aggregate owns its children exclusively. Children are declared once, in
model order, and never renamed or removed for the aggregate's lifetime:

    login = Aggregate(
        {
            'username': Field(converters.text()),
            'password': Field(converters.password()),
        },
        build=LoginData,
    )

    login.set_input(FieldPath.of('username'), 'alice')
    result = login.submit()      # SubmitResult: LoginData or every field error

Model wiring:
- build(*values) receives child values in declaration order; a dataclass
  type works as-is. Default: a dict of name -> value.
- extract(model) returns child values in declaration order for reset().
  Default: mapping lookup for Mappings, attribute access otherwise.
- build may raise ParseError for cross-field rules; the error is recorded
  at the aggregate's own path.

Submit is one full traversal in declaration order, so the error mapping is
deterministic for a given tree shape, and it contains every failure rather
than the first one found.
"""

import copy
import dataclasses
import logging
from collections.abc import Mapping as MappingABC
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from formstate.errors import ParseError, UnknownKeyError, UnknownPathError
from formstate.field import Field
from formstate.list_wrapper import ListWrapper
from formstate.node import MISSING, FormNode
from formstate.optional import OptionalWrapper
from formstate.path import FieldPath, ItemKey, ItemSegment, segment_name
from formstate.status import FieldStatus, SubmitResult

logger = logging.getLogger(__name__)


def _dict_builder(names: Tuple[str, ...]) -> Callable[..., Dict[str, Any]]:
    def build(*values: Any) -> Dict[str, Any]:
        return dict(zip(names, values))
    return build


class Aggregate(FormNode):
    """Composite node mapping field names to child nodes."""

    NODE_TYPES: Tuple[type, ...] = ()  # filled in below, once the class exists

    def __init__(
        self,
        children: Mapping[str, FormNode],
        build: Optional[Callable[..., Any]] = None,
        extract: Optional[Callable[[Any], Sequence[Any]]] = None,
    ):
        """
        Args:
            children: Ordered name -> node mapping, in model field order
            build: Model construction callback, called with child values
            extract: Model decomposition callback used by reset()
        """
        if not children:
            raise ValueError("An Aggregate needs at least one child")
        for name, child in children.items():
            if not isinstance(name, str) or not name.isidentifier():
                raise ValueError(f"Child names must be identifiers, got {name!r}")
            if not isinstance(child, self.NODE_TYPES):
                raise TypeError(
                    f"Child {name!r} must be one of "
                    f"{', '.join(t.__name__ for t in self.NODE_TYPES)}, got {type(child).__name__}"
                )
        self._children: Dict[str, FormNode] = dict(children)
        self._names: Tuple[str, ...] = tuple(self._children)
        self._build = build if build is not None else _dict_builder(self._names)
        self._extract = extract
        self._submit_attempted = False

    def __repr__(self) -> str:
        return f"Aggregate({', '.join(self._names)})"

    # ==================== STRUCTURE ====================

    @property
    def names(self) -> Tuple[str, ...]:
        return self._names

    @property
    def children(self) -> Mapping[str, FormNode]:
        return MappingProxyType(self._children)

    def __getitem__(self, name: str) -> FormNode:
        return self._children[name]

    def __contains__(self, name: object) -> bool:
        return name in self._children

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def node(self, path: FieldPath) -> FormNode:
        """Look up any node (leaf or branch) by path.

        Raises:
            UnknownPathError: The path does not name a node of this form
        """
        try:
            return self._resolve(path, FieldPath())
        except UnknownPathError as e:
            logger.warning(f"Routing failed for {str(path)!r}: {e}")
            raise

    def field(self, path: FieldPath) -> Field:
        """Look up the Field that receives input for ``path``."""
        target = self.node(path)._input_target()
        if target is None:
            logger.warning(f"Routing failed for {str(path)!r}: not an input field")
            raise UnknownPathError(path, "not an input field")
        return target

    # ==================== INPUT ====================

    def set_input(self, path: FieldPath, raw: str) -> None:
        """Route raw input to the field named by ``path``.

        Raises:
            UnknownPathError: No such field (UnknownKeyError for a stale list key)
        """
        self.field(path).set_input(raw)
        logger.debug(f"Input routed to {str(path)!r}")

    def set_present(self, path: FieldPath, present: bool) -> None:
        """Toggle the optional branch at ``path``."""
        self._wrapper(path, OptionalWrapper).set_present(present)

    def add_item(self, path: FieldPath, initial: Any = None) -> ItemKey:
        """Append an entry to the list at ``path`` and return its key."""
        return self._wrapper(path, ListWrapper).add(initial)

    def remove_item(self, path: FieldPath) -> None:
        """Remove the list entry named by the last segment of ``path``.

        ``path`` must end with an item segment, e.g. ``addresses[3]``.
        """
        last = path.segments[-1] if path else None
        if not isinstance(last, ItemSegment):
            logger.warning(f"Routing failed for {str(path)!r}: not a list entry")
            raise UnknownPathError(path, "expected a path ending in a list entry")
        wrapper = self._wrapper(FieldPath(path.segments[:-1] + (last.name,)), ListWrapper)
        if last.key not in wrapper:
            logger.warning(f"Routing failed for {str(path)!r}: stale list key")
            raise UnknownKeyError(path, last.key)
        wrapper.remove(last.key)

    def reorder_items(self, path: FieldPath, order: Sequence[ItemKey]) -> None:
        """Reorder the list at ``path``; ``order`` must permute its keys."""
        self._wrapper(path, ListWrapper).reorder(order)

    def _wrapper(self, path: FieldPath, kind: type) -> Any:
        node = self.node(path)
        if not isinstance(node, kind):
            logger.warning(f"Routing failed for {str(path)!r}: not a {kind.__name__}")
            raise UnknownPathError(path, f"not a {kind.__name__}")
        return node

    # ==================== SUBMIT ====================

    @property
    def submit_attempted(self) -> bool:
        return self._submit_attempted

    def submit(self) -> SubmitResult:
        """Validate the whole tree and build the model, or collect every error.

        Marks every evaluated field as submit-attempted. Absent optional
        branches are skipped entirely; lists contribute their current entries.
        """
        return self._run(mark=True, base=None)

    def submit_update(self, model: Any) -> SubmitResult:
        """Like submit(), but merge the form's values into an existing model.

        Model attributes the form does not own are passed through unchanged.
        """
        return self._run(mark=True, base=model)

    def evaluate(self) -> SubmitResult:
        """The result submit() would return, without marking anything."""
        return self._run(mark=False, base=None)

    def has_unsaved_changes(self, pristine: Any) -> bool:
        """True if the form's content differs from ``pristine`` or is invalid."""
        result = self._run(mark=False, base=pristine)
        return not result.ok or result.value != pristine

    def _run(self, mark: bool, base: Any) -> SubmitResult:
        errors: Dict[FieldPath, ParseError] = {}
        value = self._evaluate(FieldPath(), errors, mark, base)
        if errors:
            if mark:
                logger.debug(f"Submit failed with {len(errors)} error(s): {[str(p) for p in errors]}")
            return SubmitResult.failure(errors)
        if mark:
            logger.debug(f"Submit succeeded for {self!r}")
        return SubmitResult.success(value)

    # ==================== UI SNAPSHOTS ====================

    def status_snapshot(self) -> Dict[FieldPath, FieldStatus]:
        """Status of every evaluated field, keyed by path. Read-only."""
        out: Dict[FieldPath, FieldStatus] = {}
        self._collect_status(FieldPath(), out)
        return out

    def visible_errors(self) -> Dict[FieldPath, ParseError]:
        """Errors a UI should display right now, keyed by path. Read-only."""
        out: Dict[FieldPath, ParseError] = {}
        self._collect_visible_errors(FieldPath(), out)
        return out

    # ==================== STATE ====================

    def _values_of(self, model: Any) -> List[Any]:
        if self._extract is not None:
            values = list(self._extract(model))
            if len(values) != len(self._names):
                raise ValueError(
                    f"extract() returned {len(values)} values for {len(self._names)} fields"
                )
            return values
        if isinstance(model, MappingABC):
            return [model[name] for name in self._names]
        return [getattr(model, name) for name in self._names]

    def reset(self, model: Any) -> None:
        """Seed every descendant from ``model``; nothing counts as touched."""
        for name, value in zip(self._names, self._values_of(model)):
            self._children[name].reset(value)
        self._submit_attempted = False

    def clear(self) -> None:
        for child in self._children.values():
            child.clear()
        self._submit_attempted = False

    def is_empty(self) -> bool:
        return all(child.is_empty() for child in self._children.values())

    # ==================== NODE HOOKS ====================

    def _resolve(self, path: FieldPath, at: FieldPath) -> FormNode:
        if not path:
            return self
        head = path.head
        name = segment_name(head)
        child = self._children.get(name)
        if child is None:
            raise UnknownPathError(at.child(head), f"no field named {name!r}")
        if isinstance(head, ItemSegment):
            if not isinstance(child, ListWrapper):
                raise UnknownPathError(at.child(head), f"{name!r} is not a list")
            return child._resolve_item(head.key, path.tail, at.child(name))
        return child._resolve(path.tail, at.child(name))

    def _child_base(self, base: Any, name: str) -> Any:
        if base is None:
            return None
        if isinstance(base, MappingABC):
            return base.get(name)
        return getattr(base, name, None)

    def _assemble(self, values: List[Any], base: Any) -> Any:
        if base is None:
            return self._build(*values)
        updates = dict(zip(self._names, values))
        if isinstance(base, MappingABC):
            return {**base, **updates}
        if dataclasses.is_dataclass(base) and not isinstance(base, type):
            return dataclasses.replace(base, **updates)
        merged = copy.copy(base)
        for name, value in updates.items():
            setattr(merged, name, value)
        return merged

    def _evaluate(self, at: FieldPath, errors: Dict[FieldPath, ParseError], mark: bool, base: Any) -> Any:
        if mark:
            self._submit_attempted = True
        values = [
            child._evaluate(at.child(name), errors, mark, self._child_base(base, name))
            for name, child in self._children.items()
        ]
        if any(v is MISSING for v in values):
            return MISSING
        try:
            return self._assemble(values, base)
        except ParseError as e:
            errors[at] = e
            return MISSING

    def _collect_status(self, at: FieldPath, out: Dict[FieldPath, FieldStatus]) -> None:
        for name, child in self._children.items():
            child._collect_status(at.child(name), out)

    def _collect_visible_errors(self, at: FieldPath, out: Dict[FieldPath, ParseError]) -> None:
        for name, child in self._children.items():
            child._collect_visible_errors(at.child(name), out)

    def _input_target(self) -> Optional[Field]:
        return None


Aggregate.NODE_TYPES = (Field, Aggregate, OptionalWrapper, ListWrapper)
