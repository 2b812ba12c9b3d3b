"""
Tests for the GenePanel container.

Validation happens once at construction; a panel that exists is consistent.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from oncomarker.core.panel import GenePanel, SchemaError, UnknownGeneError


class TestConstruction:
    """Valid inputs and identifier-based alignment."""

    def test_metadata_reordered_to_expression_columns(self, small_expression):
        expression, metadata = small_expression
        panel = GenePanel(expression, metadata, cohort_label="TEST")

        assert list(panel.metadata.index) == list(expression.columns)
        assert list(panel.diagnosis) == ["Normal"] * 3 + ["Tumor"] * 3

    def test_properties(self, small_panel):
        assert small_panel.shape == (3, 6)
        assert small_panel.n_genes == 3
        assert small_panel.n_samples == 6
        assert small_panel.cohort_label == "TEST"
        assert list(small_panel.gene_ids) == ["ERBB2", "TP53", "GAPDH"]
        assert small_panel.values.dtype == np.float64

    def test_integer_matrix_accepted(self):
        expression = pd.DataFrame([[1, 2], [3, 4]], index=["A", "B"], columns=["S1", "S2"])
        metadata = pd.DataFrame({"Diagnosis": ["Tumor", "Normal"]}, index=["S1", "S2"])
        panel = GenePanel(expression, metadata, cohort_label="")
        assert panel.expression.dtypes.eq(np.float64).all()

    def test_nan_values_allowed(self, small_expression):
        expression, metadata = small_expression
        expression = expression.copy()
        expression.iloc[0, 0] = np.nan
        panel = GenePanel(expression, metadata, cohort_label="TEST")
        assert np.isnan(panel.values[0, 0])

    def test_diagnosis_column_case_insensitive(self, small_expression):
        expression, metadata = small_expression
        metadata = metadata.rename(columns={"Diagnosis": "diagnosis"})
        panel = GenePanel(expression, metadata, cohort_label="TEST")
        assert panel.diagnosis.name == "diagnosis"

    def test_inputs_not_aliased(self, small_expression):
        expression, metadata = small_expression
        panel = GenePanel(expression, metadata, cohort_label="TEST")

        expression.iloc[0, 0] = -100.0
        metadata["Extra"] = 1

        assert panel.expression.iloc[0, 0] == 5.0
        assert "Extra" not in panel.metadata.columns

    def test_values_read_only(self, small_panel):
        with pytest.raises(ValueError):
            small_panel.values[0, 0] = 0.0

    def test_expression_is_a_copy(self, small_panel):
        expression = small_panel.expression
        expression.loc["ERBB2", "S4"] = -1.0

        assert small_panel.expression.loc["ERBB2", "S4"] == 9.0
        assert small_panel.gene_values("ERBB2")["S4"] == 9.0
        assert -1.0 not in small_panel.values

    def test_metadata_is_a_copy(self, small_panel):
        small_panel.metadata["Diagnosis"] = "Normal"
        assert (small_panel.metadata["Diagnosis"] == "Tumor").sum() == 3

    def test_gene_values_is_a_copy(self, small_panel):
        values = small_panel.gene_values("ERBB2")
        values["S4"] = -1.0
        assert small_panel.gene_values("ERBB2")["S4"] == 9.0


class TestValidation:
    """Each violated invariant raises SchemaError."""

    def test_metadata_sample_missing_from_expression(self, small_expression):
        expression, metadata = small_expression
        extra = pd.DataFrame({"Diagnosis": ["Tumor"]}, index=["S99"])
        metadata = pd.concat([metadata, extra])

        with pytest.raises(SchemaError, match="S99"):
            GenePanel(expression, metadata, cohort_label="TEST")

    def test_expression_sample_missing_from_metadata(self, small_expression):
        expression, metadata = small_expression
        with pytest.raises(SchemaError, match="1 identifier"):
            GenePanel(expression, metadata.drop(index="S1"), cohort_label="TEST")

    def test_duplicate_genes(self, small_expression):
        expression, metadata = small_expression
        expression = expression.rename(index={"GAPDH": "TP53"})
        with pytest.raises(SchemaError, match="Duplicate gene"):
            GenePanel(expression, metadata, cohort_label="TEST")

    def test_duplicate_samples(self, small_expression):
        expression, metadata = small_expression
        expression = expression.rename(columns={"S2": "S1"})
        with pytest.raises(SchemaError, match="Duplicate sample"):
            GenePanel(expression, metadata, cohort_label="TEST")

    def test_non_numeric_column(self, small_expression):
        expression, metadata = small_expression
        expression = expression.astype(object)
        expression.loc["TP53", "S3"] = "n/a"
        with pytest.raises(SchemaError, match="numeric"):
            GenePanel(expression, metadata, cohort_label="TEST")

    def test_missing_diagnosis(self, small_expression):
        expression, metadata = small_expression
        metadata = metadata.rename(columns={"Diagnosis": "Histology"})
        with pytest.raises(SchemaError, match="Diagnosis"):
            GenePanel(expression, metadata, cohort_label="TEST")

    def test_empty_matrix(self):
        expression = pd.DataFrame(index=[], columns=["S1"], dtype=float)
        metadata = pd.DataFrame({"Diagnosis": ["Tumor"]}, index=["S1"])
        with pytest.raises(SchemaError, match="at least one gene"):
            GenePanel(expression, metadata, cohort_label="TEST")

    def test_schema_error_is_value_error(self):
        assert issubclass(SchemaError, ValueError)

    def test_wrong_types(self, small_expression):
        expression, metadata = small_expression
        with pytest.raises(TypeError):
            GenePanel(expression.to_numpy(), metadata, cohort_label="TEST")
        with pytest.raises(TypeError):
            GenePanel(expression, metadata, cohort_label=None)


class TestAccessors:

    def test_gene_values(self, small_panel):
        values = small_panel.gene_values("ERBB2")
        assert list(values.index) == list(small_panel.sample_ids)
        assert values["S4"] == 9.0

    def test_gene_values_unknown(self, small_panel):
        with pytest.raises(UnknownGeneError, match="MYC"):
            small_panel.gene_values("MYC")

    def test_select_genes_preserves_request_order(self, small_panel):
        subset = small_panel.select_genes(["GAPDH", "MYC", "ERBB2"])
        assert list(subset.gene_ids) == ["GAPDH", "ERBB2"]
        assert list(subset.sample_ids) == list(small_panel.sample_ids)
        assert small_panel.n_genes == 3

    def test_select_genes_warns_about_missing(self, small_panel, caplog):
        with caplog.at_level(logging.WARNING, logger="oncomarker.core.panel"):
            small_panel.select_genes(["ERBB2", "MYC"])
        assert "1 requested gene(s) not found" in caplog.text
        assert "MYC" in caplog.text

    def test_select_genes_none_found(self, small_panel):
        with pytest.raises(UnknownGeneError):
            small_panel.select_genes(["MYC", "KRAS"])

    def test_describe(self, small_panel):
        text = small_panel.describe()
        assert "GenePanel: TEST" in text
        assert "3 genes × 6 samples" in text
        assert "Tumor samples: 3" in text
        assert "Normal samples: 3" in text
        assert "Unassigned" not in text
        assert repr(small_panel) == text
