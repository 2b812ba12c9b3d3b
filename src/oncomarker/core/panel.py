"""
Core data structure for targeted gene-expression panels.

GenePanel unifies a log2-scale expression matrix with per-sample clinical
metadata and a cohort label, and validates their consistency once, at
construction time. Every analysis in the package takes a GenePanel as its
first argument.

Biological Context:
    A targeted panel is a small expression matrix restricted to genes of
    clinical interest (PAM50 drivers, tumor suppressors, oncogenes):
    - Rows = genes (HGNC symbols or other unique identifiers)
    - Columns = samples (patients, tissue specimens)
    - Values = log2-transformed expression (e.g. log2(TPM + 1))

    Clinical metadata must carry a Diagnosis field whose free-text values
    ("Primary Tumor", "Malignant", "Solid Tissue Normal", "Benign") define
    the two comparison groups for differential expression.

Engineering Design:
    - Immutable: no setters, expression values stored read-only
    - Validated: identifier sets, numeric types and required fields are
      checked before any analysis can run
    - Correspondence by identifier: metadata rows are re-ordered to follow
      the expression columns, never matched by position

Examples:
    >>> import pandas as pd
    >>> from oncomarker.core.panel import GenePanel
    >>>
    >>> expression = pd.DataFrame(
    ...     [[5.1, 7.9], [2.2, 1.0]],
    ...     index=["TP53", "ERBB2"],
    ...     columns=["S1", "S2"],
    ... )
    >>> metadata = pd.DataFrame({"Diagnosis": ["Tumor", "Normal"]}, index=["S2", "S1"])
    >>> panel = GenePanel(expression, metadata, cohort_label="TCGA-BRCA")
    >>> list(panel.metadata.index)
    ['S1', 'S2']
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

__all__ = ['GenePanel', 'SchemaError', 'UnknownGeneError', 'DIAGNOSIS_FIELD']

DIAGNOSIS_FIELD = "Diagnosis"

# Number of offending identifiers quoted in validation messages
_MAX_REPORTED = 5


class SchemaError(ValueError):
    """Raised when expression data and clinical metadata are inconsistent."""
    pass


class UnknownGeneError(Exception):
    """Raised when a requested gene is not a row of the expression matrix."""
    pass


def _preview(ids: Iterable) -> str:
    ids = sorted(map(str, ids))
    shown = ", ".join(ids[:_MAX_REPORTED])
    if len(ids) > _MAX_REPORTED:
        shown += f", ... (+{len(ids) - _MAX_REPORTED} more)"
    return f"[{shown}]"


class GenePanel:
    """
    Immutable container for a gene panel: expression + clinical metadata + cohort.

    Attributes:
        expression: Expression matrix (genes × samples), float64
        metadata: Clinical annotations indexed by sample identifier,
            in the same order as the expression columns
        cohort_label: Display label for the cohort (e.g. "TCGA-BRCA")

    Invariants:
        - gene and sample identifiers are unique
        - set(metadata.index) == set(expression.columns)
        - metadata has a Diagnosis column (name matched case-insensitively)
        - every expression value is numeric (NaN allowed)

    The metadata frame is handed out by reference: callers may append
    columns such as a risk label. The panel itself never modifies it.
    """

    def __init__(
        self,
        expression: pd.DataFrame,
        metadata: pd.DataFrame,
        cohort_label: str,
    ):
        """
        Initialize GenePanel with validation.

        Args:
            expression: DataFrame with genes as index and samples as columns
            metadata: DataFrame indexed by sample identifier with a Diagnosis column
            cohort_label: Free-text cohort label used for display only

        Raises:
            TypeError: If arguments are of the wrong type
            SchemaError: If the expression matrix and metadata violate the
                panel invariants (empty matrix, duplicate or mismatched
                identifiers, non-numeric values, missing Diagnosis field)
        """
        # Type validation
        if not isinstance(expression, pd.DataFrame):
            raise TypeError(f"expression must be pd.DataFrame, got {type(expression)}")
        if not isinstance(metadata, pd.DataFrame):
            raise TypeError(f"metadata must be pd.DataFrame, got {type(metadata)}")
        if not isinstance(cohort_label, str):
            raise TypeError(f"cohort_label must be str, got {type(cohort_label)}")

        # Shape validation
        n_genes, n_samples = expression.shape
        if n_genes < 1 or n_samples < 1:
            raise SchemaError(
                f"expression must have at least one gene and one sample, got shape {expression.shape}"
            )

        # Identifier validation
        if expression.index.has_duplicates:
            dups = expression.index[expression.index.duplicated()].unique()
            raise SchemaError(f"Duplicate gene identifiers in expression: {_preview(dups)}")
        if expression.columns.has_duplicates:
            dups = expression.columns[expression.columns.duplicated()].unique()
            raise SchemaError(f"Duplicate sample identifiers in expression: {_preview(dups)}")
        if metadata.index.has_duplicates:
            dups = metadata.index[metadata.index.duplicated()].unique()
            raise SchemaError(f"Duplicate sample identifiers in metadata: {_preview(dups)}")

        # Type of values
        non_numeric = [
            col for col, dtype in expression.dtypes.items()
            if not pd.api.types.is_numeric_dtype(dtype) or pd.api.types.is_bool_dtype(dtype)
        ]
        if non_numeric:
            raise SchemaError(
                f"expression must be fully numeric; {len(non_numeric)} non-numeric "
                f"sample column(s): {_preview(non_numeric)}"
            )

        # Sample correspondence (by identifier, not position)
        expr_samples = set(expression.columns)
        meta_samples = set(metadata.index)
        if expr_samples != meta_samples:
            only_expr = expr_samples - meta_samples
            only_meta = meta_samples - expr_samples
            raise SchemaError(
                "metadata rows must match expression columns exactly; "
                f"{len(only_expr ^ only_meta)} identifier(s) differ. "
                f"Missing from metadata: {_preview(only_expr)}. "
                f"Missing from expression: {_preview(only_meta)}."
            )

        # Required clinical field
        diagnosis_cols = [c for c in metadata.columns if str(c).lower() == DIAGNOSIS_FIELD.lower()]
        if not diagnosis_cols:
            raise SchemaError(
                f"metadata must contain a '{DIAGNOSIS_FIELD}' column. "
                f"Available columns: {list(metadata.columns)}"
            )

        values = expression.to_numpy(dtype=np.float64, copy=True)
        values.flags.writeable = False

        self._values = values
        self._expression = pd.DataFrame(
            values, index=expression.index.copy(), columns=expression.columns.copy()
        )
        self._metadata = metadata.loc[expression.columns].rename_axis(metadata.index.name).copy()
        self._diagnosis_column = diagnosis_cols[0]
        self._cohort_label = cohort_label

    @property
    def expression(self) -> pd.DataFrame:
        """Expression matrix (genes × samples).

        Returned as a copy: edits to it never reach the panel or its values.
        """
        return self._expression.copy()

    @property
    def metadata(self) -> pd.DataFrame:
        """Clinical annotations, one row per sample in column order (a copy)."""
        return self._metadata.copy()

    @property
    def cohort_label(self) -> str:
        """Cohort display label."""
        return self._cohort_label

    @property
    def values(self) -> np.ndarray:
        """Read-only expression values (genes × samples)."""
        return self._values

    @property
    def diagnosis(self) -> pd.Series:
        """Diagnosis field for each sample, in column order."""
        return self._metadata[self._diagnosis_column]

    @property
    def gene_ids(self) -> pd.Index:
        return self._expression.index

    @property
    def sample_ids(self) -> pd.Index:
        return self._expression.columns

    @property
    def shape(self) -> tuple[int, int]:
        """Panel dimensions (n_genes, n_samples)."""
        return self._values.shape

    @property
    def n_genes(self) -> int:
        return self._values.shape[0]

    @property
    def n_samples(self) -> int:
        return self._values.shape[1]

    def gene_values(self, gene: str) -> pd.Series:
        """
        Expression of one gene across all samples.

        Args:
            gene: Row identifier of the expression matrix

        Returns:
            Series indexed by sample identifier, in column order

        Raises:
            UnknownGeneError: If gene is not in the panel
        """
        if gene not in self._expression.index:
            raise UnknownGeneError(
                f"Gene '{gene}' not found in panel '{self._cohort_label}' "
                f"({self.n_genes} genes available)"
            )
        return self._expression.loc[gene].copy()

    def select_genes(self, genes: Iterable[str]) -> GenePanel:
        """
        Restrict the panel to a targeted gene list.

        Requested genes absent from the matrix are skipped with a WARNING;
        the order of the request is preserved for the genes that are kept.

        Args:
            genes: Gene identifiers to keep

        Returns:
            New GenePanel with the selected genes and the same samples

        Raises:
            UnknownGeneError: If none of the requested genes are present

        Examples:
            >>> pam50 = panel.select_genes(["ESR1", "PGR", "ERBB2", "MKI67"])
        """
        genes = list(dict.fromkeys(genes))
        found = [g for g in genes if g in self._expression.index]
        missing = [g for g in genes if g not in self._expression.index]
        if missing:
            logger.warning(f"{len(missing)} requested gene(s) not found: {missing}")
        if not found:
            raise UnknownGeneError(
                f"None of the {len(genes)} requested genes are in panel '{self._cohort_label}'"
            )
        return GenePanel(
            expression=self._expression.loc[found],
            metadata=self._metadata,
            cohort_label=self._cohort_label,
        )

    def describe(self) -> str:
        """Human-readable summary: dimensions, diagnosis groups, cohort."""
        from oncomarker.stats.groups import assign_diagnosis_groups, NORMAL, TUMOR

        groups = assign_diagnosis_groups(self.diagnosis)
        n_tumor = int((groups == TUMOR).sum())
        n_normal = int((groups == NORMAL).sum())
        n_unassigned = int(groups.isna().sum())

        lines = [
            f"GenePanel: {self._cohort_label}",
            f"  {self.n_genes} genes × {self.n_samples} samples",
            f"  Genes: {self.gene_ids[0]}...{self.gene_ids[-1]}",
            f"  Tumor samples: {n_tumor}",
            f"  Normal samples: {n_normal}",
        ]
        if n_unassigned:
            lines.append(f"  Unassigned samples: {n_unassigned}")
        lines.append(f"  Metadata columns: {list(self._metadata.columns)}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return self.describe()

    def __str__(self) -> str:
        return self.__repr__()
