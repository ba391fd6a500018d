from __future__ import annotations

import os as _os
from typing import Optional

DEBUG_PY_TRACE_VAR = "MONKEY_DEBUG_PY_TRACE"
PROMPT_VAR = "MONKEY_PROMPT"
DEFAULT_PROMPT = ">> "

_TRUTHY = ("1", "true", "yes", "on")


def envvar_value_by_name(name: str) -> Optional[str]:
    """Get the current value of an env var by name, or None if missing."""
    return _os.environ.get(name)


def debug_py_trace_enabled() -> bool:
    """True when host-level failures should also print a Python traceback."""
    value = envvar_value_by_name(DEBUG_PY_TRACE_VAR)
    return value is not None and value.strip().lower() in _TRUTHY


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_VAR] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_VAR, None)


def prompt_text() -> str:
    value = envvar_value_by_name(PROMPT_VAR)
    return value if value else DEFAULT_PROMPT
