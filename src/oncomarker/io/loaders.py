"""
Loaders that turn delimited expression files into GenePanel objects.

Two layouts are supported:

1. One file per diagnosis group (the TCGA "BC-TCGA-Normal.txt" /
   "BC-TCGA-Tumor.txt" layout): genes as rows, samples as columns, tab
   separated. Diagnosis labels are assigned by file of origin.

2. One expression table plus one metadata table keyed by sample ID, with a
   Diagnosis column.

Text cells that cannot be parsed as numbers become NaN (with a warning),
so downstream statistics can omit them per gene.

Examples:
    >>> from oncomarker.io.loaders import load_group_files
    >>>
    >>> panel = load_group_files(
    ...     "raw_data/BC-TCGA-Normal.txt",
    ...     "raw_data/BC-TCGA-Tumor.txt",
    ...     cohort_label="TCGA-BRCA",
    ...     genes=["ESR1", "PGR", "ERBB2", "TP53", "BRCA1"],
    ... )
    >>> print(panel.describe())
"""

from __future__ import annotations

import csv
import logging
import warnings
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd

from oncomarker.core.panel import DIAGNOSIS_FIELD, GenePanel

logger = logging.getLogger(__name__)

__all__ = ['sniff_delimiter', 'read_expression_table', 'load_group_files', 'load_panel']


def sniff_delimiter(path: Path, sample_size: int = 8192) -> str:
    """
    Detect the delimiter of a text table.

    Uses csv.Sniffer, falling back to counting candidate delimiters in the
    header line.

    Raises:
        ValueError: If no delimiter can be found
    """
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        sample = f.read(sample_size)

    try:
        return csv.Sniffer().sniff(sample, delimiters='\t,;').delimiter
    except csv.Error:
        pass

    first_line = sample.split('\n')[0]
    counts = {d: first_line.count(d) for d in ('\t', ',', ';')}
    if max(counts.values()) == 0:
        raise ValueError(f"Could not detect delimiter in {path}")
    return max(counts, key=counts.get)


def _check_file(path: Path) -> Path:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")
    return path


def read_expression_table(path: Path, sep: Optional[str] = None) -> pd.DataFrame:
    """
    Read a genes × samples table and coerce every cell to a number.

    Args:
        path: Delimited text file; first column holds gene identifiers,
            header row holds sample identifiers
        sep: Delimiter. Detected from the file content if None.

    Returns:
        float64 DataFrame (genes × samples). Unparseable cells are NaN.

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the file is empty or cannot be parsed
    """
    path = _check_file(path)
    if sep is None:
        sep = sniff_delimiter(path)

    try:
        raw = pd.read_csv(path, sep=sep, index_col=0, dtype=str)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"File is empty: {path}") from e
    except Exception as e:
        raise ValueError(f"Failed to read expression table {path}: {e}") from e

    if raw.shape[0] == 0:
        raise ValueError(f"Expression table contains no genes (rows): {path}")
    if raw.shape[1] == 0:
        raise ValueError(f"Expression table contains no samples (columns): {path}")

    raw.index = raw.index.astype(str)
    raw.columns = raw.columns.astype(str)

    if raw.index.duplicated().any():
        n_duplicates = int(raw.index.duplicated().sum())
        warnings.warn(
            f"Found {n_duplicates} duplicate gene IDs in {path.name}. "
            "Using first occurrence of each.",
            UserWarning,
        )
        raw = raw[~raw.index.duplicated(keep='first')]

    data = raw.apply(lambda col: pd.to_numeric(col.str.strip(), errors='coerce')).astype('float64')

    n_coerced = int((data.isna() & raw.notna()).to_numpy().sum())
    if n_coerced:
        warnings.warn(
            f"{n_coerced:,} non-numeric cell(s) in {path.name} were set to NaN",
            UserWarning,
        )

    logger.info(f"Read {data.shape[0]} genes × {data.shape[1]} samples from {path}")
    return data


def load_group_files(
    normal_path: Path,
    tumor_path: Path,
    cohort_label: str,
    genes: Optional[Sequence[str]] = None,
    sep: str = '\t',
) -> GenePanel:
    """
    Build a GenePanel from one normal and one tumor expression file.

    Columns are concatenated normal first, then tumor. Rows are aligned on
    gene identifiers; genes present in only one file are dropped with a
    warning.

    Args:
        normal_path: Expression file of the normal samples
        tumor_path: Expression file of the tumor samples
        cohort_label: Cohort label for the panel (e.g. "TCGA-BRCA")
        genes: Optional targeted gene list; the panel keeps only these
        sep: Delimiter of both files (tab by default)

    Returns:
        GenePanel whose metadata is indexed by SampleID with a Diagnosis column

    Raises:
        FileNotFoundError: If either file is missing
        ValueError: If the files cannot be parsed or share no genes
        SchemaError: If the same sample ID appears in both files
        UnknownGeneError: If none of the requested genes are present
    """
    normal = read_expression_table(normal_path, sep=sep)
    tumor = read_expression_table(tumor_path, sep=sep)

    shared = normal.index.intersection(tumor.index, sort=False)
    n_dropped = len(normal.index.union(tumor.index)) - len(shared)
    if len(shared) == 0:
        raise ValueError(f"{normal_path} and {tumor_path} have no gene identifiers in common")
    if n_dropped:
        warnings.warn(
            f"{n_dropped} gene(s) present in only one of the group files were dropped",
            UserWarning,
        )

    expression = pd.concat([normal.loc[shared], tumor.loc[shared]], axis=1)

    logger.info(f"Normal samples: {normal.shape[1]}")
    logger.info(f"Tumor samples: {tumor.shape[1]}")

    metadata = pd.DataFrame(
        {
            DIAGNOSIS_FIELD: pd.Categorical(
                ['Normal'] * normal.shape[1] + ['Tumor'] * tumor.shape[1],
                categories=['Normal', 'Tumor'],
            ),
        },
        index=pd.Index(expression.columns, name='SampleID'),
    )

    panel = GenePanel(expression, metadata, cohort_label=cohort_label)
    if genes is not None:
        panel = panel.select_genes(genes)
    return panel


def load_panel(
    expression_path: Path,
    metadata_path: Path,
    cohort_label: str,
    genes: Optional[Sequence[str]] = None,
) -> GenePanel:
    """
    Build a GenePanel from an expression table and a metadata table.

    Args:
        expression_path: genes × samples table
        metadata_path: Table whose first column is the sample ID and which
            has a Diagnosis column
        cohort_label: Cohort label for the panel
        genes: Optional targeted gene list

    Returns:
        Validated GenePanel

    Raises:
        FileNotFoundError: If either file is missing
        ValueError: If a file cannot be parsed
        SchemaError: If sample IDs or the Diagnosis field do not line up
        UnknownGeneError: If none of the requested genes are present
    """
    expression = read_expression_table(expression_path)

    metadata_path = _check_file(metadata_path)
    try:
        metadata = pd.read_csv(metadata_path, sep=sniff_delimiter(metadata_path), index_col=0)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"File is empty: {metadata_path}") from e
    metadata.index = metadata.index.astype(str)

    panel = GenePanel(expression, metadata, cohort_label=cohort_label)
    if genes is not None:
        panel = panel.select_genes(genes)
    return panel
