"""
Visualization module for panel analysis results.

Examples
--------
>>> from oncomarker.viz import plot_volcano
>>> fig = plot_volcano(results, cohort_label="TCGA-BRCA")
>>> fig.save("figures/volcano.png")
"""

from oncomarker.viz.core import Figure
from oncomarker.viz.styles import CATEGORY_COLORS, Palette, configure_style
from oncomarker.viz.volcano import plot_volcano

__all__ = [
    "Figure",
    "CATEGORY_COLORS",
    "Palette",
    "configure_style",
    "plot_volcano",
]
