"""
OncoMarker - Targeted Panel Analysis for Cancer Transcriptomics

Differential expression (Welch t-test with Benjamini-Hochberg FDR) and
median-split biomarker risk stratification over tumor/normal gene panels.
"""

__version__ = "0.1.0"

from oncomarker.core.panel import GenePanel, SchemaError, UnknownGeneError
from oncomarker.stats.differential import InsufficientSamplesError, differential_expression
from oncomarker.stats.classify import classify
from oncomarker.stats.risk import RiskDirection, predict_risk

__all__ = [
    "GenePanel",
    "SchemaError",
    "UnknownGeneError",
    "InsufficientSamplesError",
    "differential_expression",
    "classify",
    "RiskDirection",
    "predict_risk",
]
