"""
Significance categories for differential expression results.

Each gene falls into exactly one bucket:

    Upregulated      Log2FC >  fc_threshold  and  PValue < p_threshold
    Downregulated    Log2FC < -fc_threshold  and  PValue < p_threshold
    Not Significant  everything else, including undefined p-values

The category strings are a presentation contract: the volcano plot maps
them to red, blue and grey.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

__all__ = [
    'UPREGULATED',
    'DOWNREGULATED',
    'NOT_SIGNIFICANT',
    'CATEGORIES',
    'significance_category',
    'classify',
    'volcano_table',
]

UPREGULATED = "Upregulated"
DOWNREGULATED = "Downregulated"
NOT_SIGNIFICANT = "Not Significant"

CATEGORIES = (UPREGULATED, DOWNREGULATED, NOT_SIGNIFICANT)


def _check_thresholds(fc_threshold: float, p_threshold: float) -> None:
    if not fc_threshold > 0:
        raise ValueError(f"fc_threshold must be positive, got {fc_threshold}")
    if not 0 < p_threshold < 1:
        raise ValueError(f"p_threshold must be in (0, 1), got {p_threshold}")


def significance_category(
    log2_fc: float,
    p_value: float,
    fc_threshold: float = 1.0,
    p_threshold: float = 0.05,
) -> str:
    """
    Category of a single (Log2FC, p-value) pair.

    Example:
        >>> significance_category(2.0, 0.01)
        'Upregulated'
        >>> significance_category(2.0, float('nan'))
        'Not Significant'
    """
    _check_thresholds(fc_threshold, p_threshold)
    # Comparisons against NaN are False
    if p_value < p_threshold:
        if log2_fc > fc_threshold:
            return UPREGULATED
        if log2_fc < -fc_threshold:
            return DOWNREGULATED
    return NOT_SIGNIFICANT


def classify(
    results: pd.DataFrame,
    fc_threshold: float = 1.0,
    p_threshold: float = 0.05,
) -> pd.DataFrame:
    """
    Add a Category column to a differential expression table.

    Args:
        results: Table with Log2FC and PValue columns
        fc_threshold: Absolute Log2FC cutoff (1.0 = two-fold change)
        p_threshold: Raw p-value cutoff

    Returns:
        Copy of results with a Category column; input is not modified.

    Raises:
        ValueError: If thresholds are out of range or columns are missing
    """
    _check_thresholds(fc_threshold, p_threshold)
    missing = [c for c in ("Log2FC", "PValue") if c not in results.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    fc = results['Log2FC'].to_numpy(dtype=np.float64)
    p = results['PValue'].to_numpy(dtype=np.float64)

    with np.errstate(invalid='ignore'):
        significant = p < p_threshold
        up = significant & (fc > fc_threshold)
        down = significant & (fc < -fc_threshold)

    out = results.copy()
    out['Category'] = np.select([up, down], [UPREGULATED, DOWNREGULATED], default=NOT_SIGNIFICANT)
    return out


def volcano_table(
    results: pd.DataFrame,
    fc_threshold: float = 1.0,
    p_threshold: float = 0.05,
) -> pd.DataFrame:
    """
    Classified results plus NegLog10P, the volcano plot coordinates.

    NegLog10P is NaN wherever PValue is undefined; plotting code is
    expected to omit those genes. p-values that underflowed to zero are
    clipped to the smallest positive double so they stay finite.
    """
    out = classify(results, fc_threshold=fc_threshold, p_threshold=p_threshold)
    p = out['PValue'].to_numpy(dtype=np.float64)
    out['NegLog10P'] = -np.log10(np.clip(p, np.finfo(np.float64).tiny, None))
    return out
