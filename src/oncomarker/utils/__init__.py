"""Utility modules for panel analysis output."""

from oncomarker.utils.fileio import (
    atomic_write_csv,
    atomic_write_json,
    atomic_write_text,
)

__all__ = [
    'atomic_write_csv',
    'atomic_write_json',
    'atomic_write_text',
]
