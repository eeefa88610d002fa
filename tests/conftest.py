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

from monkey.runtime import new_environment  # noqa: E402
from monkey.types import Environment  # noqa: E402
from monkey.utils import DEBUG_PY_TRACE_ENV, RECURSION_LIMIT_ENV, REPL_PROMPT_ENV  # noqa: E402


@pytest.fixture
def env() -> Environment:
    """Fresh root scope with the default builtins."""
    return new_environment()


@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shell settings from leaking into runner/REPL tests."""
    for name in (DEBUG_PY_TRACE_ENV, REPL_PROMPT_ENV, RECURSION_LIMIT_ENV):
        # setenv first so teardown restores the variable even if a test sets it
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


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
