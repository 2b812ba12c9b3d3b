"""
I/O module for loading panels and writing analysis results.

Key Functions:
    - load_group_files: Build a GenePanel from one normal and one tumor file
    - load_panel: Build a GenePanel from an expression and a metadata table
    - write_results: Export a differential expression table
    - write_risk_labels: Export per-sample risk labels

Examples:
    >>> from oncomarker.io import load_group_files, write_results
    >>> from oncomarker.stats import differential_expression
    >>>
    >>> panel = load_group_files("normal.txt", "tumor.txt", cohort_label="TCGA-BRCA")
    >>> write_results(differential_expression(panel), "results/de.csv")
"""

from oncomarker.io.loaders import (
    load_group_files,
    load_panel,
    read_expression_table,
    sniff_delimiter,
)
from oncomarker.io.writers import write_results, write_risk_labels

__all__ = [
    'load_group_files',
    'load_panel',
    'read_expression_table',
    'sniff_delimiter',
    'write_results',
    'write_risk_labels',
]
