"""
Atomic file-write utilities.

Output files are written to a temporary file in the destination directory
and moved into place with ``os.replace()``, so an interrupted run never
leaves a half-written results table behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from typing import IO, Any, Iterator


@contextmanager
def _atomic_open(path: str | os.PathLike) -> Iterator[IO[str]]:
    """Yield a text handle whose content replaces *path* on clean exit."""
    path = os.fspath(path)
    dir_path = os.path.dirname(path) or "."
    os.makedirs(dir_path, exist_ok=True)
    tmp_path: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", dir=dir_path, suffix=".tmp", delete=False, newline=""
        ) as tmp:
            tmp_path = tmp.name
            yield tmp
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def atomic_write_text(path: str | os.PathLike, content: str) -> None:
    """Write *content* to *path* atomically."""
    with _atomic_open(path) as fh:
        fh.write(content)


def atomic_write_json(path: str | os.PathLike, data: Any, *, indent: int = 2) -> None:
    """Serialize *data* as JSON to *path* atomically."""
    with _atomic_open(path) as fh:
        json.dump(data, fh, indent=indent)


def atomic_write_csv(path: str | os.PathLike, frame, **kwargs) -> None:
    """Write a pandas DataFrame or Series to CSV atomically.

    Extra keyword arguments are passed to ``to_csv``.
    """
    with _atomic_open(path) as fh:
        frame.to_csv(fh, **kwargs)
