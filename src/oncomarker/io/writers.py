"""
CSV writers for analysis outputs.

Output Files:
    - Differential expression table: Gene, Log2FC, PValue, FDR[, Category]
    - Risk labels: one row per sample with the Risk column, optionally
      joined to the clinical metadata

All files are written atomically (temp file + rename).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from oncomarker.utils.fileio import atomic_write_csv

logger = logging.getLogger(__name__)

__all__ = ['write_results', 'write_risk_labels']


def write_results(results: pd.DataFrame, path: Path) -> Path:
    """
    Write a differential expression table to CSV.

    Args:
        results: Output of differential_expression() or classify()
        path: Destination .csv path

    Returns:
        The path written
    """
    path = Path(path)
    atomic_write_csv(path, results, index=False)
    logger.info(f"Wrote {len(results)} genes to {path}")
    return path


def write_risk_labels(
    labels: pd.Series,
    path: Path,
    metadata: Optional[pd.DataFrame] = None,
) -> Path:
    """
    Write per-sample risk labels to CSV.

    Args:
        labels: Output of predict_risk()
        path: Destination .csv path
        metadata: If given, the labels are written as an extra column of
            a copy of this table (joined on sample ID); the table itself is
            not modified.

    Returns:
        The path written
    """
    path = Path(path)
    name = labels.name or "Risk"

    if metadata is not None:
        table = metadata.copy()
        table[name] = labels.reindex(table.index)
    else:
        table = labels.rename(name).to_frame()
    table = table.rename_axis(table.index.name or "SampleID")

    atomic_write_csv(path, table)
    logger.info(f"Wrote risk labels for {len(table)} samples to {path}")
    return path
