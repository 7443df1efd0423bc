from __future__ import annotations

import os
import re
from pathlib import Path

_ASSIGNMENT = re.compile(
    r"""^(?:export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*
        (?:"(?P<double>[^"]*)"|'(?P<single>[^']*)'|(?P<bare>[^#]*?))
        \s*(?:\#.*)?$""",
    re.VERBOSE,
)


def parse_env(text: str) -> dict[str, str]:
    """``KEY=value`` pairs from dotenv text; unparseable lines are skipped."""
    values: dict[str, str] = {}
    for line in text.splitlines():
        match = _ASSIGNMENT.match(line.strip())
        if match is None:
            continue
        value = next(
            v for v in match.group("double", "single", "bare") if v is not None
        )
        values[match.group("key")] = value
    return values


def load_env_file(path: str | os.PathLike[str] = ".env") -> list[str]:
    """Populate os.environ from a dotenv file without overriding existing vars.

    Returns the names that were actually set.
    """
    env_path = Path(path)
    if not env_path.is_file():
        return []
    applied = []
    for key, value in parse_env(env_path.read_text()).items():
        if key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)
    return applied
