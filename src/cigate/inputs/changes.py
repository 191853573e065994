"""Changed-file listers: a two-commit git diff or a pull-request change set."""

from __future__ import annotations

import json
import subprocess
from typing import TYPE_CHECKING

from cigate._meta import logger
from cigate.errors import ChangeListingError

if TYPE_CHECKING:
    from pathlib import Path

    from cigate.core.types import ChangedPath

_PATH_KEYS = ("filename", "path")


def list_changed_files(
    base: str,
    head: str = "HEAD",
    *,
    cwd: Path | None = None,
    git: str = "git",
) -> list[ChangedPath]:
    """Return the paths changed between *base* and *head*, relative to the repository root."""
    cmd = [git, "diff", "--name-only", base, head]
    logger.debug("running %s", " ".join(cmd))
    try:
        proc = subprocess.run(  # noqa: S603
            cmd,
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
        )
    except OSError as exc:
        msg = f"failed to invoke {git}: {exc}"
        raise ChangeListingError(msg) from exc

    if proc.returncode != 0:
        stderr = proc.stderr.strip() or f"exit status {proc.returncode}"
        msg = f"git diff {base} {head} failed: {stderr}"
        raise ChangeListingError(msg)
    return [line.strip() for line in proc.stdout.splitlines() if line.strip()]


def _entry_path(entry: object) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        for key in _PATH_KEYS:
            value = entry.get(key)
            if isinstance(value, str):
                return value
    msg = f"unrecognised change-set entry: {entry!r}"
    raise ChangeListingError(msg)


def parse_change_set(text: str) -> list[ChangedPath]:
    """Parse a change set given as JSON or as one path per line.

    JSON input is an array of path strings or of objects carrying a
    ``filename`` (or ``path``) key, as returned by pull-request file APIs.
    """
    stripped = text.strip()
    if not stripped:
        return []
    if stripped.startswith("["):
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError as exc:
            msg = f"invalid JSON change set: {exc}"
            raise ChangeListingError(msg) from exc
        paths = [_entry_path(entry).strip() for entry in data]
    else:
        paths = [line.strip() for line in stripped.splitlines()]
    return [p for p in paths if p]


__all__ = ["list_changed_files", "parse_change_set"]
