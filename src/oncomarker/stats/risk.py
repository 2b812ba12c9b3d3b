"""
Single-biomarker risk stratification by median split.

Patients are split at the cohort median expression of one gene. Which side
of the split is "High Risk" depends on the biological role of the gene:

    LOW_RISK_HIGH_EXPR   tumor suppressors (TP53, BRCA1, PTEN)
                         expression <  median  ->  High Risk
    HIGH_RISK_HIGH_EXPR  oncogenes (ERBB2, MYC, CCND1)
                         expression >  median  ->  High Risk

Both comparisons are strict, so a patient exactly at the median is
"Low Risk" whichever direction is used. Patients with missing expression
receive a missing label.

The result is a categorical Series with "Low Risk" as the reference
(first) level. The panel is never modified; attach the labels to the
metadata copy if needed:

    >>> metadata = panel.metadata
    >>> metadata['Risk'] = predict_risk(panel, 'TP53')
"""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np
import pandas as pd

from oncomarker.core.panel import GenePanel

logger = logging.getLogger(__name__)

__all__ = [
    'LOW_RISK',
    'HIGH_RISK',
    'RISK_LEVELS',
    'RiskDirection',
    'risk_cutoff',
    'predict_risk',
    'summarize_risk',
]

LOW_RISK = "Low Risk"
HIGH_RISK = "High Risk"

RISK_LEVELS = [LOW_RISK, HIGH_RISK]


class RiskDirection(Enum):
    """Biological role of the stratifying gene."""

    LOW_RISK_HIGH_EXPR = "low_risk_high_expr"    # tumor suppressor
    HIGH_RISK_HIGH_EXPR = "high_risk_high_expr"  # oncogene

    @classmethod
    def parse(cls, value: RiskDirection | str) -> RiskDirection:
        """Convert a configuration string to a RiskDirection.

        Raises:
            ValueError: If value is not a recognized direction
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = [d.value for d in cls]
            raise ValueError(
                f"Unknown risk direction {value!r}. Valid directions: {valid}"
            ) from None


def risk_cutoff(panel: GenePanel, gene: str) -> float:
    """
    Median expression of gene across the cohort, ignoring missing values.

    Returns NaN if the gene has no finite values.

    Raises:
        UnknownGeneError: If gene is not in the panel
    """
    values = panel.gene_values(gene).to_numpy(dtype=np.float64)
    finite = values[~np.isnan(values)]
    if finite.size == 0:
        return np.nan
    return float(np.median(finite))


def predict_risk(
    panel: GenePanel,
    gene: str,
    direction: RiskDirection | str = RiskDirection.LOW_RISK_HIGH_EXPR,
) -> pd.Series:
    """
    Stratify patients into Low/High Risk from one gene's expression.

    Args:
        panel: GenePanel to stratify
        gene: Gene symbol; must be a row of the expression matrix
        direction: "low_risk_high_expr" (tumor suppressor) or
            "high_risk_high_expr" (oncogene), or the RiskDirection member

    Returns:
        Categorical Series named "Risk", indexed by sample identifier in
        the panel's column order, categories ["Low Risk", "High Risk"].

    Raises:
        UnknownGeneError: If gene is not in the panel
        ValueError: If direction is not recognized

    Example:
        >>> labels = predict_risk(panel, "ERBB2", direction="high_risk_high_expr")
        >>> labels.value_counts()
    """
    direction = RiskDirection.parse(direction)
    expr = panel.gene_values(gene)
    values = expr.to_numpy(dtype=np.float64)

    cutoff = risk_cutoff(panel, gene)
    if np.isnan(cutoff):
        logger.warning(f"No finite expression for {gene}; all risk labels are undefined")
    else:
        logger.info(f"Stratifying cohort based on {gene} median expression: {cutoff:.2f}")

    with np.errstate(invalid='ignore'):
        if direction is RiskDirection.LOW_RISK_HIGH_EXPR:
            high = values < cutoff
        else:
            high = values > cutoff

    labels = np.where(high, HIGH_RISK, LOW_RISK).astype(object)
    labels[np.isnan(values) | np.isnan(cutoff)] = np.nan

    return pd.Series(
        pd.Categorical(labels, categories=RISK_LEVELS),
        index=expr.index.copy(),
        name="Risk",
    )


def summarize_risk(labels: pd.Series) -> pd.Series:
    """
    Count patients per risk level.

    Both levels are always reported; an "NA" entry is added when some
    labels are undefined.
    """
    counts = labels.value_counts(sort=False).reindex(RISK_LEVELS, fill_value=0)
    n_missing = int(labels.isna().sum())
    if n_missing:
        counts = pd.concat([counts, pd.Series({"NA": n_missing})])
    return counts.astype(int)
