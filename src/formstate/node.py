"""
Shared interface of the four form node kinds.

A form is a tree built from a closed set of node kinds:

    Field            leaf: raw input + converter + state flags
    Aggregate        named children, builds one model
    OptionalWrapper  presence toggle around an Aggregate or Field
    ListWrapper      keyed, reorderable entries cloned from a prototype

Every traversal (routing, submit, status snapshot, visible errors, reset)
is implemented once per kind on top of the hooks below. Each hook receives
the FieldPath of the node it runs on, so error and status mappings are keyed
by full paths without any back-references to parents.
"""

from typing import Any, Dict, Optional, TYPE_CHECKING

from formstate.errors import ParseError
from formstate.path import FieldPath

if TYPE_CHECKING:
    from formstate.field import Field
    from formstate.status import FieldStatus


class _Missing:
    """Sentinel for "this branch produced no value"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'MISSING'

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING: Any = _Missing()


class FormNode:
    """Base class of Field, Aggregate, OptionalWrapper and ListWrapper."""

    # Can sit inside an OptionalWrapper or serve as a ListWrapper prototype
    wrappable: bool = True

    # ==================== ROUTING ====================

    def _resolve(self, path: FieldPath, at: FieldPath) -> 'FormNode':
        """Return the node addressed by ``path`` relative to this node.

        Args:
            path: Remaining segments to consume (empty means this node)
            at: Path of this node, for error messages

        Raises:
            UnknownPathError: No node matches
        """
        raise NotImplementedError

    def _input_target(self) -> Optional['Field']:
        """Field that receives raw input when this node is addressed, if any."""
        return None

    # ==================== EVALUATION ====================

    def _evaluate(self, at: FieldPath, errors: Dict[FieldPath, ParseError], mark: bool, base: Any) -> Any:
        """Produce this branch's value or MISSING, recording errors by path.

        Args:
            at: Path of this node
            errors: Accumulator shared by the whole traversal
            mark: Flag evaluated fields as submit-attempted
            base: Existing model value to merge into, or None to build fresh
        """
        raise NotImplementedError

    def _collect_status(self, at: FieldPath, out: Dict[FieldPath, 'FieldStatus']) -> None:
        raise NotImplementedError

    def _collect_visible_errors(self, at: FieldPath, out: Dict[FieldPath, ParseError]) -> None:
        raise NotImplementedError

    # ==================== STATE ====================

    def reset(self, value: Any) -> None:
        """Seed this branch from a model value without counting as a touch."""
        raise NotImplementedError

    def clear(self) -> None:
        """Return this branch to blank, untouched input."""
        raise NotImplementedError

    def is_empty(self) -> bool:
        raise NotImplementedError
