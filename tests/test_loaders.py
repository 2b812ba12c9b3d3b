"""Tests for loading panels from delimited files."""

import numpy as np
import pandas as pd
import pytest

from oncomarker.core.panel import SchemaError, UnknownGeneError
from oncomarker.io.loaders import (
    load_group_files,
    load_panel,
    read_expression_table,
    sniff_delimiter,
)


def _write(path, text):
    path.write_text(text)
    return path


@pytest.fixture
def group_files(tmp_path):
    normal = _write(
        tmp_path / "Normal.txt",
        "Gene\tN1\tN2\tN3\n"
        "ERBB2\t5.0\t5.5\t6.0\n"
        "TP53\t2.0\t2.1\t1.9\n"
        "ESR1\t4.0\t4.2\t3.9\n",
    )
    tumor = _write(
        tmp_path / "Tumor.txt",
        "Gene\tT1\tT2\tT3\tT4\n"
        "ERBB2\t9.0\t9.5\t10.0\tNA\n"
        "TP53\t2.0\tnull\t1.8\t2.2\n"
        "MYC\t7.0\t7.1\t6.9\t7.3\n",
    )
    return normal, tumor


class TestReadExpressionTable:

    def test_reads_numeric(self, group_files):
        normal, _ = group_files
        df = read_expression_table(normal, sep="\t")
        assert df.shape == (3, 3)
        assert list(df.columns) == ["N1", "N2", "N3"]
        assert (df.dtypes == np.float64).all()
        assert df.loc["ERBB2", "N2"] == 5.5

    def test_text_coerced_to_nan_with_warning(self, tmp_path):
        path = _write(tmp_path / "expr.tsv", "Gene\tS1\tS2\nA\t1.0\tfoo\nB\t2.0\t3.0\n")
        with pytest.warns(UserWarning, match="1 non-numeric"):
            df = read_expression_table(path)
        assert np.isnan(df.loc["A", "S2"])
        assert df.loc["B", "S2"] == 3.0

    def test_duplicate_genes_keep_first(self, tmp_path):
        path = _write(tmp_path / "expr.csv", "Gene,S1,S2\nA,1,2\nA,3,4\nB,5,6\n")
        with pytest.warns(UserWarning, match="duplicate gene"):
            df = read_expression_table(path)
        assert list(df.index) == ["A", "B"]
        assert df.loc["A", "S1"] == 1.0

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_expression_table(tmp_path / "nope.txt")

    def test_empty_file(self, tmp_path):
        path = _write(tmp_path / "empty.txt", "")
        with pytest.raises(ValueError):
            read_expression_table(path, sep="\t")

    def test_sniff_delimiter(self, tmp_path):
        tsv = _write(tmp_path / "a.txt", "Gene\tS1\tS2\nA\t1\t2\n")
        csv = _write(tmp_path / "b.txt", "Gene,S1,S2\nA,1,2\n")
        assert sniff_delimiter(tsv) == "\t"
        assert sniff_delimiter(csv) == ","


class TestLoadGroupFiles:

    def test_builds_panel(self, group_files):
        normal, tumor = group_files
        with pytest.warns(UserWarning):
            panel = load_group_files(normal, tumor, cohort_label="TCGA-BRCA")

        assert panel.cohort_label == "TCGA-BRCA"
        assert list(panel.sample_ids) == ["N1", "N2", "N3", "T1", "T2", "T3", "T4"]
        assert list(panel.diagnosis) == ["Normal"] * 3 + ["Tumor"] * 4
        assert panel.metadata.index.name == "SampleID"

    def test_genes_inner_joined(self, group_files):
        normal, tumor = group_files
        with pytest.warns(UserWarning, match="2 gene"):
            panel = load_group_files(normal, tumor, cohort_label="")
        assert set(panel.gene_ids) == {"ERBB2", "TP53"}

    def test_missing_markers_become_nan(self, group_files):
        normal, tumor = group_files
        with pytest.warns(UserWarning):
            panel = load_group_files(normal, tumor, cohort_label="")
        assert np.isnan(panel.expression.loc["ERBB2", "T4"])
        assert np.isnan(panel.expression.loc["TP53", "T2"])

    def test_gene_subset(self, group_files, caplog):
        normal, tumor = group_files
        with pytest.warns(UserWarning):
            panel = load_group_files(normal, tumor, cohort_label="", genes=["TP53", "BRCA1"])
        assert list(panel.gene_ids) == ["TP53"]
        assert "BRCA1" in caplog.text

    def test_gene_subset_none_found(self, group_files):
        normal, tumor = group_files
        with pytest.warns(UserWarning), pytest.raises(UnknownGeneError, match="requested genes"):
            load_group_files(normal, tumor, cohort_label="", genes=["BRCA1"])

    def test_shared_sample_id(self, tmp_path):
        a = _write(tmp_path / "a.txt", "Gene\tS1\tS2\nA\t1\t2\n")
        b = _write(tmp_path / "b.txt", "Gene\tS2\tS3\nA\t3\t4\n")
        with pytest.raises(SchemaError, match="Duplicate sample"):
            load_group_files(a, b, cohort_label="")


class TestLoadPanel:

    def test_expression_plus_metadata(self, tmp_path):
        expr = _write(tmp_path / "expr.tsv", "Gene\tS1\tS2\tS3\nA\t1\t2\t3\nB\t4\t5\t6\n")
        meta = _write(
            tmp_path / "meta.csv",
            "SampleID,Diagnosis,Stage\nS3,Benign,I\nS1,Malignant,II\nS2,Malignant,III\n",
        )
        panel = load_panel(expr, meta, cohort_label="COHORT")

        assert list(panel.metadata.index) == ["S1", "S2", "S3"]
        assert list(panel.metadata["Stage"]) == ["II", "III", "I"]
        assert panel.metadata.index.name == "SampleID"

    def test_metadata_mismatch(self, tmp_path):
        expr = _write(tmp_path / "expr.tsv", "Gene\tS1\tS2\nA\t1\t2\n")
        meta = _write(tmp_path / "meta.csv", "SampleID,Diagnosis\nS1,Tumor\nS9,Normal\n")
        with pytest.raises(SchemaError):
            load_panel(expr, meta, cohort_label="")

    def test_metadata_missing(self, tmp_path):
        expr = _write(tmp_path / "expr.tsv", "Gene\tS1\nA\t1\n")
        with pytest.raises(FileNotFoundError):
            load_panel(expr, tmp_path / "meta.csv", cohort_label="")
