from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from monkey_ref.environment import Environment
from monkey_ref.runtime import init_stdlib
from monkey_ref.utils import DEBUG_PY_TRACE_VAR, PROMPT_VAR


@pytest.fixture(autouse=True)
def _clean_monkey_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shell settings from leaking into diagnostics output."""
    monkeypatch.delenv(DEBUG_PY_TRACE_VAR, raising=False)
    monkeypatch.delenv(PROMPT_VAR, raising=False)
    init_stdlib()


@pytest.fixture
def env() -> Environment:
    return Environment()


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Fail fast if pytest ever generates duplicate node IDs."""
    del session
    del config

    seen: Dict[str, int] = {}
    duplicates: List[str] = []
    for item in items:
        nodeid = item.nodeid
        if nodeid in seen:
            duplicates.append(nodeid)
            continue
        seen[nodeid] = 1

    if not duplicates:
        return

    lines = "\n".join(f"- {nodeid}" for nodeid in sorted(set(duplicates)))
    raise pytest.UsageError(
        "Duplicate pytest nodeids detected during collection:\n" f"{lines}"
    )
