"""Tests for the volcano plot."""

import matplotlib.pyplot as plt
import pytest

from oncomarker.stats import classify, differential_expression
from oncomarker.viz import CATEGORY_COLORS, configure_style, plot_volcano
from oncomarker.viz.core import Figure


@pytest.fixture
def results(synthetic_panel):
    return differential_expression(synthetic_panel)


def test_category_colors():
    assert CATEGORY_COLORS == {
        "Upregulated": "#E41A1C",
        "Downregulated": "#377EB8",
        "Not Significant": "#999999",
    }


def test_configure_style():
    with plt.rc_context():
        configure_style(font_scale=1.0)
        assert plt.rcParams["axes.spines.top"] is False
        assert plt.rcParams["legend.frameon"] is False
        assert plt.rcParams["axes.facecolor"] == "white"


def test_returns_figure(results):
    fig = plot_volcano(results, cohort_label="SYNTH")
    try:
        assert isinstance(fig, Figure)
        assert fig.title == "Volcano Plot: SYNTH"
        assert fig.metadata["n_genes"] == len(results)
        assert fig.metadata["n_omitted"] == 0
        counts = fig.metadata["category_counts"]
        expected = classify(results)["Category"].value_counts()
        assert counts["Upregulated"] == expected["Upregulated"] >= 5
        assert counts["Downregulated"] == expected["Downregulated"] >= 5
        assert sum(counts.values()) == len(results)
    finally:
        fig.close()


def test_threshold_lines(results):
    fig = plot_volcano(results, fc_threshold=1.5, p_threshold=0.01)
    try:
        ax = fig.fig.axes[0]
        xs = sorted(line.get_xdata()[0] for line in ax.get_lines() if line.get_xdata()[0] == line.get_xdata()[1])
        ys = [line.get_ydata()[0] for line in ax.get_lines() if line.get_ydata()[0] == line.get_ydata()[1]]
        assert xs == [-1.5, 1.5]
        assert ys == pytest.approx([2.0])
    finally:
        fig.close()


def test_undefined_pvalues_omitted(small_panel):
    results = differential_expression(small_panel)
    fig = plot_volcano(results)
    try:
        assert fig.metadata["n_omitted"] == 1
        plotted = sum(len(c.get_offsets()) for c in fig.fig.axes[0].collections)
        assert plotted == 2
    finally:
        fig.close()


def test_save(results, tmp_path):
    fig = plot_volcano(results, cohort_label="SYNTH")
    path = fig.save(tmp_path / "volcano.png", dpi=50)
    fig.close()
    assert path.exists()
    assert path.stat().st_size > 0
    assert fig.fig.number not in plt.get_fignums()
