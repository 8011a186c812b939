"""
OptionalWrapper: a presence toggle around an Aggregate or Field.

When absent the wrapper contributes None on submit, reports no status and no
errors, and leaves its inner fields unmarked. Inner raw input is retained
while absent, so toggling a section off and on again restores what the user
typed:

    details = OptionalWrapper(Aggregate({...}))
    form.set_present(FieldPath.of('details'), True)
    form.set_input(FieldPath.of('details', 'city'), 'Oslo')
    form.set_present(FieldPath.of('details'), False)   # 'Oslo' is kept
"""

import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

from formstate.errors import ParseError
from formstate.node import FormNode
from formstate.path import FieldPath

if TYPE_CHECKING:
    from formstate.field import Field
    from formstate.status import FieldStatus

logger = logging.getLogger(__name__)


class OptionalWrapper(FormNode):
    """Node whose inner value exists only while ``present`` is True."""

    wrappable = False

    def __init__(self, inner: FormNode, present: bool = False):
        """
        Args:
            inner: Aggregate or Field holding the optional value's input
            present: Initial presence
        """
        if not isinstance(inner, FormNode) or not inner.wrappable:
            raise TypeError(
                f"OptionalWrapper inner must be an Aggregate or Field, got {type(inner).__name__}"
            )
        self.inner = inner
        self._present = bool(present)

    def __repr__(self) -> str:
        return f"OptionalWrapper({self.inner!r}, present={self._present})"

    @property
    def present(self) -> bool:
        return self._present

    def set_present(self, present: bool) -> None:
        """Toggle presence; inner raw state survives either way."""
        present = bool(present)
        if present != self._present:
            logger.debug(f"Optional {'enabled' if present else 'disabled'}")
        self._present = present

    # ==================== STATE ====================

    def reset(self, value: Any) -> None:
        """None makes the wrapper absent with blank inner input; anything else seeds it."""
        if value is None:
            self._present = False
            self.inner.clear()
        else:
            self._present = True
            self.inner.reset(value)

    def clear(self) -> None:
        self._present = False
        self.inner.clear()

    def is_empty(self) -> bool:
        return not self._present or self.inner.is_empty()

    # ==================== NODE HOOKS ====================

    def _resolve(self, path: FieldPath, at: FieldPath) -> FormNode:
        if not path:
            return self
        # Transparent: the inner node shares this wrapper's path
        return self.inner._resolve(path, at)

    def _input_target(self) -> Optional['Field']:
        return self.inner._input_target()

    def _evaluate(self, at: FieldPath, errors: Dict[FieldPath, ParseError], mark: bool, base: Any) -> Any:
        if not self._present:
            return None
        return self.inner._evaluate(at, errors, mark, base)

    def _collect_status(self, at: FieldPath, out: Dict[FieldPath, 'FieldStatus']) -> None:
        if self._present:
            self.inner._collect_status(at, out)

    def _collect_visible_errors(self, at: FieldPath, out: Dict[FieldPath, ParseError]) -> None:
        if self._present:
            self.inner._collect_visible_errors(at, out)
