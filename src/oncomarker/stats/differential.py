"""
Tumor-vs-normal differential expression for targeted gene panels.

For every gene the engine computes:
    - Log2FC: difference of group means on the log2 scale,
      mean(tumor) - mean(normal), which approximates log2(tumor / normal)
    - PValue: two-sided Welch (unequal-variance) t-test
    - FDR: Benjamini-Hochberg adjusted p-value across the panel

Non-finite values (NaN, and the -inf that log2 of a zero count produces)
are omitted per gene and per group. Genes for which the t-test is
undefined (fewer than two finite values in a group, or data that are
constant in both groups) are kept in the output with an undefined
PValue and FDR; they never abort the analysis.

Multiple testing convention:
    Undefined p-values are excluded from the BH correction: they keep an
    undefined FDR and do not count towards the number of tests m.

References:
    - Welch (1947) Biometrika 34(1-2):28-35
    - Benjamini & Hochberg (1995) J R Stat Soc B 57(1):289-300
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray
from scipy import stats as scipy_stats

from oncomarker.core.panel import GenePanel
from oncomarker.stats.groups import resolve_diagnosis_groups

logger = logging.getLogger(__name__)

__all__ = [
    'MIN_GROUP_SIZE',
    'RESULT_COLUMNS',
    'InsufficientSamplesError',
    'GeneTestResult',
    'welch_test',
    'fdr_correction',
    'differential_expression',
]

# Welch variance estimates are unstable below this group size
MIN_GROUP_SIZE = 3

RESULT_COLUMNS = ["Gene", "Log2FC", "PValue", "FDR"]


class InsufficientSamplesError(Exception):
    """Raised when a diagnosis group is too small for a Welch t-test."""
    pass


@dataclass(frozen=True)
class GeneTestResult:
    """Welch t-test result for a single gene.

    Attributes:
        log2_fc: mean(tumor) - mean(normal) over finite values
        t_statistic: Welch t-statistic (NaN when the test is undefined)
        p_value: Two-sided p-value (NaN when the test is undefined)
        n_tumor: Number of finite tumor values used
        n_normal: Number of finite normal values used
    """

    log2_fc: float
    t_statistic: float
    p_value: float
    n_tumor: int
    n_normal: int

    @property
    def is_defined(self) -> bool:
        return not np.isnan(self.p_value)


def _finite(values: ArrayLike) -> NDArray[np.float64]:
    arr = np.asarray(values, dtype=np.float64)
    return arr[np.isfinite(arr)]


def welch_test(tumor_values: ArrayLike, normal_values: ArrayLike) -> GeneTestResult:
    """
    Welch two-sample t-test of tumor vs normal expression for one gene.

    Args:
        tumor_values: Expression values of the tumor samples; NaN and
            +/-inf are omitted
        normal_values: Expression values of the normal samples; NaN and
            +/-inf are omitted

    Returns:
        GeneTestResult. log2_fc is NaN when either group has no finite
        values; t_statistic and p_value are NaN when the test is undefined.

    Example:
        >>> res = welch_test([8.1, 7.9, 8.4], [5.0, 5.2, 4.9])
        >>> round(res.log2_fc, 3)
        3.1
    """
    tumor = _finite(tumor_values)
    normal = _finite(normal_values)
    n_tumor, n_normal = tumor.size, normal.size

    mean_tumor = float(tumor.mean()) if n_tumor else np.nan
    mean_normal = float(normal.mean()) if n_normal else np.nan
    log2_fc = mean_tumor - mean_normal

    if n_tumor < 2 or n_normal < 2:
        return GeneTestResult(log2_fc, np.nan, np.nan, n_tumor, n_normal)

    stderr = np.sqrt(tumor.var(ddof=1) / n_tumor + normal.var(ddof=1) / n_normal)

    # Constant data: the statistic is 0/0 or dominated by rounding error
    scale = max(abs(mean_tumor), abs(mean_normal))
    if stderr == 0 or stderr < 10 * np.finfo(np.float64).eps * scale:
        return GeneTestResult(log2_fc, np.nan, np.nan, n_tumor, n_normal)

    t_stat, p_value = scipy_stats.ttest_ind(tumor, normal, equal_var=False)
    return GeneTestResult(log2_fc, float(t_stat), float(p_value), n_tumor, n_normal)


def fdr_correction(pvalues: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Benjamini-Hochberg adjusted p-values.

    Args:
        pvalues: Array of raw p-values. NaN entries are left as NaN and
            are not counted as tests.

    Returns:
        Array of adjusted p-values, same length and order as pvalues.
    """
    from statsmodels.stats.multitest import multipletests

    pvalues = np.asarray(pvalues, dtype=np.float64)
    valid_mask = ~np.isnan(pvalues)
    adj_pvals = np.full_like(pvalues, np.nan)

    if not np.any(valid_mask):
        return adj_pvals

    _, adj_pvals[valid_mask], _, _ = multipletests(pvalues[valid_mask], method="fdr_bh")

    return adj_pvals


def differential_expression(panel: GenePanel, n_jobs: int = 1) -> pd.DataFrame:
    """
    Run tumor-vs-normal differential expression on every gene of a panel.

    This is the main entry point of the statistics layer.

    Args:
        panel: Validated GenePanel. Groups are derived from its Diagnosis field.
        n_jobs: Number of parallel jobs for the per-gene tests. Results and
            ordering do not depend on this value.

    Returns:
        DataFrame with columns Gene, Log2FC, PValue, FDR; one row per gene,
        sorted by ascending PValue with undefined p-values last.

    Raises:
        InsufficientSamplesError: If the tumor or normal group has fewer
            than MIN_GROUP_SIZE samples.

    Example:
        >>> results = differential_expression(panel)
        >>> results[results['FDR'] < 0.05]['Gene'].tolist()
    """
    groups = resolve_diagnosis_groups(panel.diagnosis)

    undersized = [
        f"{name} (n={n})"
        for name, n in (("tumor", groups.n_tumor), ("normal", groups.n_normal))
        if n < MIN_GROUP_SIZE
    ]
    if undersized:
        raise InsufficientSamplesError(
            f"Insufficient samples for Welch t-test in cohort '{panel.cohort_label}': "
            f"need at least {MIN_GROUP_SIZE} per group, got {', '.join(undersized)}"
        )

    logger.info(
        f"Analyzing {panel.n_genes} genes across {panel.n_samples} samples "
        f"(tumor={groups.n_tumor}, normal={groups.n_normal})"
    )

    values = panel.values
    tumor = values[:, panel.sample_ids.get_indexer(groups.tumor)]
    normal = values[:, panel.sample_ids.get_indexer(groups.normal)]

    if n_jobs == 1:
        results = [welch_test(tumor[i], normal[i]) for i in range(panel.n_genes)]
    else:
        from joblib import Parallel, delayed

        results = Parallel(n_jobs=n_jobs)(
            delayed(welch_test)(tumor[i], normal[i]) for i in range(panel.n_genes)
        )

    pvalues = np.array([r.p_value for r in results], dtype=np.float64)
    n_undefined = int(np.isnan(pvalues).sum())
    if n_undefined:
        logger.debug(f"Welch t-test undefined for {n_undefined} gene(s); p-value set to NaN")

    table = pd.DataFrame({
        'Gene': panel.gene_ids.to_numpy(),
        'Log2FC': np.array([r.log2_fc for r in results], dtype=np.float64),
        'PValue': pvalues,
        'FDR': fdr_correction(pvalues),
    })

    return table.sort_values(
        'PValue', ascending=True, na_position='last', kind='mergesort'
    ).reset_index(drop=True)
