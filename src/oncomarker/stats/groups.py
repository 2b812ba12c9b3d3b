"""
Diagnosis group assignment for two-group comparisons.

Free-text Diagnosis values are matched case-insensitively against two
patterns. Matching is a substring search, so "Primary Tumor" and
"Solid Tissue Normal" resolve like "Tumor" and "Normal".

    tumor   <- Tumor | Malignant
    normal  <- Normal | Benign

A sample matching neither pattern, or both (e.g. "Tumor-adjacent normal"),
is left unassigned. Unassigned samples are excluded from both groups and
reported with a WARNING so that shrinking group sizes never go unnoticed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

__all__ = [
    'TUMOR',
    'NORMAL',
    'TUMOR_PATTERN',
    'NORMAL_PATTERN',
    'DiagnosisGroups',
    'assign_diagnosis_groups',
    'resolve_diagnosis_groups',
]

TUMOR = "tumor"
NORMAL = "normal"

TUMOR_PATTERN = r"Tumor|Malignant"
NORMAL_PATTERN = r"Normal|Benign"


@dataclass(frozen=True)
class DiagnosisGroups:
    """Sample identifiers of each diagnosis group.

    Attributes:
        tumor: Samples whose Diagnosis matches the tumor pattern only.
        normal: Samples whose Diagnosis matches the normal pattern only.
        unassigned: Samples matching neither or both patterns.
    """

    tumor: pd.Index
    normal: pd.Index
    unassigned: pd.Index

    @property
    def n_tumor(self) -> int:
        return len(self.tumor)

    @property
    def n_normal(self) -> int:
        return len(self.normal)


def assign_diagnosis_groups(diagnosis: pd.Series) -> pd.Series:
    """
    Map each sample's Diagnosis value to "tumor", "normal" or NaN.

    Args:
        diagnosis: Diagnosis values indexed by sample identifier. Missing
            values are treated as matching neither pattern.

    Returns:
        Object Series with the same index holding TUMOR, NORMAL or NaN.
    """
    text = diagnosis.astype("string")
    is_tumor = text.str.contains(TUMOR_PATTERN, case=False, regex=True).fillna(False).astype(bool)
    is_normal = text.str.contains(NORMAL_PATTERN, case=False, regex=True).fillna(False).astype(bool)

    labels = np.full(len(diagnosis), np.nan, dtype=object)
    labels[(is_tumor & ~is_normal).to_numpy()] = TUMOR
    labels[(is_normal & ~is_tumor).to_numpy()] = NORMAL
    return pd.Series(labels, index=diagnosis.index, name="group", dtype=object)


def resolve_diagnosis_groups(diagnosis: pd.Series) -> DiagnosisGroups:
    """
    Partition samples into tumor, normal and unassigned.

    Logs a WARNING listing the unassigned samples, if any.

    Args:
        diagnosis: Diagnosis values indexed by sample identifier.

    Returns:
        DiagnosisGroups with the sample identifiers of each partition.
    """
    groups = assign_diagnosis_groups(diagnosis)

    result = DiagnosisGroups(
        tumor=groups.index[(groups == TUMOR).to_numpy()],
        normal=groups.index[(groups == NORMAL).to_numpy()],
        unassigned=groups.index[groups.isna().to_numpy()],
    )

    if len(result.unassigned):
        shown = list(map(str, result.unassigned[:5]))
        more = f" (+{len(result.unassigned) - 5} more)" if len(result.unassigned) > 5 else ""
        logger.warning(
            f"{len(result.unassigned)} sample(s) excluded: Diagnosis matches neither "
            f"or both of '{TUMOR_PATTERN}' and '{NORMAL_PATTERN}': {shown}{more}"
        )

    logger.info(f"Diagnosis groups: tumor={result.n_tumor}, normal={result.n_normal}")
    return result
