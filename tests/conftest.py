"""
Pytest configuration and shared fixtures.

This module provides synthetic panel generators and shared fixtures for all
test suites.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from oncomarker.core.panel import GenePanel


def generate_synthetic_panel(
    n_genes: int = 40,
    n_tumor: int = 12,
    n_normal: int = 10,
    n_up: int = 5,
    n_down: int = 5,
    effect: float = 3.0,
    seed: int = 42,
) -> GenePanel:
    """
    Generate a tumor/normal panel with known differential genes.

    Args:
        n_genes: Number of genes (rows)
        n_tumor: Number of tumor samples
        n_normal: Number of normal samples
        n_up: Genes 0..n_up-1 are shifted up by effect in tumor
        n_down: The next n_down genes are shifted down by effect in tumor
        effect: Log2 shift of the differential genes
        seed: Random seed for reproducibility

    Returns:
        GenePanel with Diagnosis values "Primary Tumor" / "Solid Tissue Normal"

    Design:
        - log2-scale expression around 8 with unit noise
        - normal samples first, as produced by load_group_files
    """
    rng = np.random.default_rng(seed)
    n_samples = n_normal + n_tumor

    data = rng.normal(loc=8.0, scale=1.0, size=(n_genes, n_samples))
    tumor_cols = slice(n_normal, n_samples)
    data[:n_up, tumor_cols] += effect
    data[n_up:n_up + n_down, tumor_cols] -= effect

    genes = [f"GENE{i:03d}" for i in range(n_genes)]
    samples = [f"N{i:02d}" for i in range(n_normal)] + [f"T{i:02d}" for i in range(n_tumor)]

    expression = pd.DataFrame(data, index=genes, columns=samples)
    metadata = pd.DataFrame(
        {
            "Diagnosis": ["Solid Tissue Normal"] * n_normal + ["Primary Tumor"] * n_tumor,
            "Age": rng.integers(30, 80, size=n_samples),
        },
        index=samples,
    )
    return GenePanel(expression, metadata, cohort_label="SYNTH")


@pytest.fixture
def synthetic_panel():
    """40 genes, 12 tumor vs 10 normal, 5 up and 5 down."""
    return generate_synthetic_panel()


@pytest.fixture
def small_expression():
    """3 genes × 6 samples, metadata rows deliberately out of order."""
    expression = pd.DataFrame(
        [
            [5.0, 5.5, 6.0, 9.0, 9.5, 10.0],
            [2.0, 2.1, 1.9, 2.0, 2.2, 1.8],
            [7.0, 7.0, 7.0, 7.0, 7.0, 7.0],
        ],
        index=["ERBB2", "TP53", "GAPDH"],
        columns=["S1", "S2", "S3", "S4", "S5", "S6"],
    )
    metadata = pd.DataFrame(
        {"Diagnosis": ["Tumor", "Tumor", "Tumor", "Normal", "Normal", "Normal"]},
        index=["S4", "S5", "S6", "S1", "S2", "S3"],
    )
    return expression, metadata


@pytest.fixture
def small_panel(small_expression):
    expression, metadata = small_expression
    return GenePanel(expression, metadata, cohort_label="TEST")


@pytest.fixture
def risk_panel():
    """One marker gene with expression [1, 2, 3, 4, 5] (median 3)."""
    samples = ["P1", "P2", "P3", "P4", "P5"]
    expression = pd.DataFrame(
        [[1.0, 2.0, 3.0, 4.0, 5.0], [np.nan, 1.0, np.nan, 2.0, 3.0]],
        index=["TP53", "MYC"],
        columns=samples,
    )
    metadata = pd.DataFrame(
        {"Diagnosis": ["Tumor"] * 5, "Stage": ["I", "II", "II", "III", "IV"]},
        index=samples,
    )
    return GenePanel(expression, metadata, cohort_label="RISK")

