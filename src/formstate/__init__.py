"""
Typed form-state engine.

Keeps the raw text of every input as the source of truth, derives a typed
status from it on demand, and assembles a domain model on submit (or reports
every field error at once, keyed by path).

Key Features:
- Field state machine: raw input, touched / submit-attempted flags, status
- Nested forms: Aggregate, OptionalWrapper (presence toggle), ListWrapper
  (keyed, reorderable entries)
- FieldPath identifiers that stay valid across list reordering
- Pluggable converters for parse/format between text and values
- Contextvars-based configuration scoping

Quick Start:
    >>> from dataclasses import dataclass
    >>> from formstate import Aggregate, Field, FieldPath, converters
    >>>
    >>> @dataclass
    ... class LoginData:
    ...     username: str
    ...     password: str
    >>>
    >>> form = Aggregate(
    ...     {'username': Field(converters.text()), 'password': Field(converters.password())},
    ...     build=LoginData,
    ... )
    >>> form.set_input(FieldPath.of('username'), 'alice')
    >>> form.set_input(FieldPath.of('password'), 'pw')
    >>> form.submit().unwrap()
    LoginData(username='alice', password='pw')

Modules:
    - field: Field state machine
    - aggregate: Aggregate composite, submit and routing
    - optional: OptionalWrapper presence toggle
    - list_wrapper: ListWrapper keyed entries
    - path: FieldPath, ItemKey, ItemSegment
    - converters: Converter and stock converter factories
    - status: Empty / Valid / Invalid and SubmitResult
    - errors: ParseError family and routing errors
    - config: FormConfig and form_config_context
"""

from formstate import converters
from formstate.aggregate import Aggregate
from formstate.config import (
    FormConfig,
    form_config_context,
    get_base_form_config,
    get_form_config,
    reset_form_config,
    set_form_config,
)
from formstate.converters import Converter
from formstate.errors import (
    ConversionError,
    InvalidFormatError,
    InvalidReorderError,
    NumberOutOfRangeError,
    ParseError,
    RequiredError,
    SubmitError,
    UnknownKeyError,
    UnknownPathError,
)
from formstate.field import Field
from formstate.list_wrapper import ListWrapper
from formstate.node import MISSING, FormNode
from formstate.optional import OptionalWrapper
from formstate.path import FieldPath, ItemKey, ItemSegment
from formstate.status import EMPTY, Empty, FieldStatus, Invalid, SubmitResult, Valid

__version__ = "0.1.0"

__all__ = [
    # Nodes
    'FormNode',
    'Field',
    'Aggregate',
    'OptionalWrapper',
    'ListWrapper',
    'MISSING',
    # Paths
    'FieldPath',
    'ItemKey',
    'ItemSegment',
    # Converters
    'Converter',
    'converters',
    # Status
    'Empty',
    'Valid',
    'Invalid',
    'EMPTY',
    'FieldStatus',
    'SubmitResult',
    # Errors
    'ParseError',
    'RequiredError',
    'InvalidFormatError',
    'ConversionError',
    'NumberOutOfRangeError',
    'UnknownPathError',
    'UnknownKeyError',
    'InvalidReorderError',
    'SubmitError',
    # Config
    'FormConfig',
    'get_form_config',
    'get_base_form_config',
    'set_form_config',
    'reset_form_config',
    'form_config_context',
]
