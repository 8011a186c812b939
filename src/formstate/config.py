"""
Engine-wide configuration with contextvars-based scoping.

Two layers, resolved innermost first:
- Scoped override: form_config_context(**overrides) pushes a modified config
  for the duration of a with-block (nests, restores on exit)
- Base config: set_form_config() replaces the process-wide default

Usage:
    set_form_config(FormConfig(whitespace_is_empty=True))

    with form_config_context(realtime_validation=False):
        # touched-but-invalid fields stay quiet until submit
        errors = form.visible_errors()

Fields read the active config when computing status and key their status
cache on it, so switching config never serves a stale status.
"""

import contextvars
import dataclasses
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormConfig:
    """Behavioural switches for status and error display.

    Attributes:
        whitespace_is_empty: Treat whitespace-only raw input as Empty instead
            of passing it to the converter.
        realtime_validation: Show parse errors on touched fields before any
            submit attempt. When False, errors only appear after submit.
    """
    whitespace_is_empty: bool = False
    realtime_validation: bool = True


_DEFAULT_CONFIG = FormConfig()
_base_config: FormConfig = _DEFAULT_CONFIG

# Scoped override; None means "use the base config"
_current_config: contextvars.ContextVar[Optional[FormConfig]] = contextvars.ContextVar(
    'formstate_config', default=None
)


def set_form_config(config: FormConfig) -> None:
    """Replace the process-wide base configuration."""
    global _base_config
    if not isinstance(config, FormConfig):
        raise TypeError(f"Expected FormConfig, got {type(config).__name__}")
    _base_config = config
    logger.debug(f"Base form config set: {config}")


def get_base_form_config() -> FormConfig:
    return _base_config


def reset_form_config() -> None:
    """Restore the built-in defaults (mainly for tests)."""
    set_form_config(_DEFAULT_CONFIG)


def get_form_config() -> FormConfig:
    """Return the configuration active in the current context."""
    scoped = _current_config.get()
    return scoped if scoped is not None else _base_config


@contextmanager
def form_config_context(config: Optional[FormConfig] = None, **overrides: Any) -> Iterator[FormConfig]:
    """Activate a configuration for the duration of a with-block.

    Args:
        config: Full config to activate. Defaults to the currently active one.
        **overrides: Field overrides applied on top of ``config``.

    Yields:
        The configuration that is active inside the block.
    """
    base = config if config is not None else get_form_config()
    active = dataclasses.replace(base, **overrides) if overrides else base
    token = _current_config.set(active)
    try:
        yield active
    finally:
        _current_config.reset(token)
