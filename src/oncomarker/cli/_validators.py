"""Shared argparse type validators for CLI parameter bounds checking.

These validators produce clear error messages when users pass invalid
values (e.g., ``--p-threshold 2.0``, ``--fc-threshold -1``). They are
intended to be used as the ``type=`` argument in ``add_argument()``.
"""

from __future__ import annotations

import argparse


def _probability(value: str) -> float:
    """argparse type for values in the open interval (0, 1)."""
    fvalue = float(value)
    if not (0 < fvalue < 1):
        raise argparse.ArgumentTypeError(
            f"{value} is not a valid probability (must be in (0, 1))"
        )
    return fvalue


def _positive_float(value: str) -> float:
    """argparse type for positive floats (> 0)."""
    fvalue = float(value)
    if fvalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive float")
    return fvalue


def _n_jobs(value: str) -> int:
    """argparse type for joblib n_jobs: any non-zero integer (-1 = all cores)."""
    ivalue = int(value)
    if ivalue == 0:
        raise argparse.ArgumentTypeError("n_jobs must be a non-zero integer")
    return ivalue


def _gene_list(value: str) -> list[str]:
    """argparse type for a comma-separated gene list."""
    genes = [g.strip() for g in value.split(",") if g.strip()]
    if not genes:
        raise argparse.ArgumentTypeError(f"{value!r} contains no gene symbols")
    return genes
