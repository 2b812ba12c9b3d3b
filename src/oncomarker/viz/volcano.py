"""
Volcano plot of tumor-vs-normal differential expression.

X = Log2FC, Y = -log10(p-value), colour = significance category.
Dashed lines mark the fold-change cutoffs (+/- fc_threshold) and the
p-value cutoff. Genes with an undefined p-value cannot be placed on the
y axis and are left out of the plot (their count is stored in the figure
metadata).
"""

from __future__ import annotations

import logging
from typing import Optional

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from adjustText import adjust_text

from oncomarker.stats.classify import CATEGORIES, NOT_SIGNIFICANT, volcano_table
from oncomarker.viz.core import Figure
from oncomarker.viz.styles import Palette, italicize_gene

logger = logging.getLogger(__name__)

__all__ = ['plot_volcano']


def plot_volcano(
    results: pd.DataFrame,
    cohort_label: str = "",
    fc_threshold: float = 1.0,
    p_threshold: float = 0.05,
    n_labels: int = 10,
    palette: Optional[Palette] = None,
    figsize: tuple[float, float] = (8, 6),
) -> Figure:
    """
    Volcano plot of a differential expression table.

    Args:
        results: Output of differential_expression() (Gene, Log2FC, PValue);
            an existing Category column is recomputed with the given thresholds
        cohort_label: Shown in the title as "Volcano Plot: <cohort>"
        fc_threshold: Log2FC cutoff, drawn at +/- fc_threshold
        p_threshold: p-value cutoff, drawn at -log10(p_threshold)
        n_labels: Number of most significant non-grey genes to label
        palette: Colours for categories and threshold lines (default Palette())
        figsize: Figure dimensions

    Returns:
        Figure wrapper with matplotlib figure
    """
    if palette is None:
        palette = Palette()
    colors = palette.categories

    df = volcano_table(results, fc_threshold=fc_threshold, p_threshold=p_threshold)
    plotted = df[df["NegLog10P"].notna()]
    n_omitted = len(df) - len(plotted)
    if n_omitted:
        logger.info(f"{n_omitted} gene(s) with undefined p-value omitted from volcano plot")

    fig, ax = plt.subplots(figsize=figsize)

    for category in CATEGORIES:
        subset = plotted[plotted["Category"] == category]
        if subset.empty:
            continue
        ax.scatter(
            subset["Log2FC"], subset["NegLog10P"],
            c=colors[category],
            s=20,
            alpha=0.7,
            edgecolors="none",
            label=category,
        )

    # Threshold lines
    for x in (-fc_threshold, fc_threshold):
        ax.axvline(x, color=palette.threshold, linestyle="--", linewidth=0.8)
    ax.axhline(-np.log10(p_threshold), color=palette.threshold, linestyle="--", linewidth=0.8)

    # Label top significant genes
    top = plotted[plotted["Category"] != NOT_SIGNIFICANT].nlargest(n_labels, "NegLog10P")
    texts = []
    for _, row in top.iterrows():
        gene = str(row["Gene"])
        label = italicize_gene(gene) if gene.isalnum() else gene
        texts.append(ax.text(row["Log2FC"], row["NegLog10P"], label, fontsize=8, color="#1e293b"))
    if len(texts) > 1:
        adjust_text(texts, ax=ax, arrowprops=dict(arrowstyle="-", color="#94a3b8", lw=0.5))

    ax.set_xlabel("Log2 Fold Change (Tumor/Normal)")
    ax.set_ylabel(r"-log$_{10}$(p-value)")
    title = f"Volcano Plot: {cohort_label}" if cohort_label else "Volcano Plot"
    fig.suptitle(title, fontweight="bold")
    ax.set_title(
        f"Thresholds: p < {p_threshold:g} and |Log2FC| > {fc_threshold:g}",
        fontsize=9, color="#64748b",
    )

    legend_elements = [mpatches.Patch(color=colors[c], label=c) for c in CATEGORIES]
    ax.legend(handles=legend_elements, loc="upper center", bbox_to_anchor=(0.5, -0.12), ncol=3)

    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    fig.tight_layout()

    counts = df["Category"].value_counts().reindex(list(CATEGORIES), fill_value=0)
    return Figure(
        fig=fig,
        title=title,
        description="Log2 fold change vs -log10 p-value, coloured by significance category",
        metadata={
            "cohort": cohort_label,
            "fc_threshold": fc_threshold,
            "p_threshold": p_threshold,
            "n_genes": len(df),
            "n_omitted": n_omitted,
            "category_counts": {k: int(v) for k, v in counts.items()},
        },
    )
