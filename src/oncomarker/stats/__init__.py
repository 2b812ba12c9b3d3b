"""
Statistical analysis of gene panels.

Exports core functions for:
- Tumor/normal group assignment from the Diagnosis field
- Per-gene Welch t-tests with Benjamini-Hochberg correction
- Significance categories for volcano plots
- Median-split risk stratification
"""

from .groups import (
    TUMOR,
    NORMAL,
    DiagnosisGroups,
    assign_diagnosis_groups,
    resolve_diagnosis_groups,
)
from .differential import (
    MIN_GROUP_SIZE,
    InsufficientSamplesError,
    GeneTestResult,
    welch_test,
    fdr_correction,
    differential_expression,
)
from .classify import (
    UPREGULATED,
    DOWNREGULATED,
    NOT_SIGNIFICANT,
    significance_category,
    classify,
    volcano_table,
)
from .risk import (
    LOW_RISK,
    HIGH_RISK,
    RiskDirection,
    risk_cutoff,
    predict_risk,
    summarize_risk,
)

__all__ = [
    "TUMOR",
    "NORMAL",
    "DiagnosisGroups",
    "assign_diagnosis_groups",
    "resolve_diagnosis_groups",
    "MIN_GROUP_SIZE",
    "InsufficientSamplesError",
    "GeneTestResult",
    "welch_test",
    "fdr_correction",
    "differential_expression",
    "UPREGULATED",
    "DOWNREGULATED",
    "NOT_SIGNIFICANT",
    "significance_category",
    "classify",
    "volcano_table",
    "LOW_RISK",
    "HIGH_RISK",
    "RiskDirection",
    "risk_cutoff",
    "predict_risk",
    "summarize_risk",
]
