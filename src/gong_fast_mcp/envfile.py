"""In-place update of a single ``KEY=VALUE`` line in a dotenv file."""

import re
from pathlib import Path

_LINE_SPLIT = re.compile(r"\r?\n")


def persist_env_value(path: str | Path, key: str, value: str) -> bool:
    """Set ``key=value`` in the env file at *path*.

    An existing ``key=`` line is replaced, otherwise the line is appended.
    Other lines and the file's line-ending style are preserved. Missing
    files are left alone.

    Returns:
        True if the file was rewritten.
    """
    env_path = Path(path)
    if not value or not env_path.exists():
        return False

    with open(env_path, "r", encoding="utf-8", newline="") as f:
        current = f.read()
    newline = "\r\n" if "\r\n" in current else "\n"

    lines = _LINE_SPLIT.split(current)
    prefix = f"{key}="
    replaced = False
    for i, line in enumerate(lines):
        if line.strip().startswith(prefix):
            lines[i] = f"{key}={value}"
            replaced = True

    if not replaced:
        # Keep a trailing newline trailing
        if lines and lines[-1] == "":
            lines.insert(len(lines) - 1, f"{key}={value}")
        else:
            lines.append(f"{key}={value}")

    updated = newline.join(lines)
    if updated == current:
        return False

    with open(env_path, "w", encoding="utf-8", newline="") as f:
        f.write(updated)
    return True
