"""
Core data structures for targeted panel analysis.

GenePanel is the single entity every analysis operates on: a validated
expression matrix with clinical metadata and a cohort label.

Examples:
    >>> from oncomarker.core import GenePanel, SchemaError
    >>> panel = GenePanel(expression, metadata, cohort_label="TCGA-BRCA")
    >>> print(panel.describe())
"""

from oncomarker.core.panel import GenePanel, SchemaError, UnknownGeneError, DIAGNOSIS_FIELD

__all__ = [
    'GenePanel',
    'SchemaError',
    'UnknownGeneError',
    'DIAGNOSIS_FIELD',
]
