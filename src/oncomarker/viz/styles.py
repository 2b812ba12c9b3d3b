"""
Visual conventions for panel analysis figures.

Domain Conventions
------------------
- Upregulated = Red (#E41A1C), Downregulated = Blue (#377EB8),
  Not Significant = Grey (#999999) (ColorBrewer Set1)
- Significance thresholds drawn as dashed black lines
- Gene symbols italicized (use $gene$ in matplotlib)
"""

from __future__ import annotations

from dataclasses import dataclass
import matplotlib.pyplot as plt
import seaborn as sns

from oncomarker.stats.classify import DOWNREGULATED, NOT_SIGNIFICANT, UPREGULATED


@dataclass(frozen=True)
class Palette:
    """
    Color palette for differential expression figures.

    Attributes
    ----------
    up : str
        Color for upregulated genes
    down : str
        Color for downregulated genes
    neutral : str
        Color for genes that are not significant
    threshold : str
        Color for threshold lines
    """
    up: str = "#E41A1C"        # Red
    down: str = "#377EB8"      # Blue
    neutral: str = "#999999"   # Grey
    threshold: str = "black"

    @property
    def categories(self) -> dict[str, str]:
        """Color mapping for significance categories."""
        return {UPREGULATED: self.up, DOWNREGULATED: self.down, NOT_SIGNIFICANT: self.neutral}


CATEGORY_COLORS = Palette().categories


def configure_style(font_scale: float = 1.0) -> None:
    """
    Configure matplotlib and seaborn for a minimal, white-background look
    at paper-sized fonts.

    Parameters
    ----------
    font_scale : float
        Multiplier for all font sizes.
    """
    sns.set_theme(style="white", context="paper", font_scale=font_scale)
    plt.rcParams.update({
        "figure.facecolor": "white",
        "axes.facecolor": "white",
        "axes.spines.top": False,
        "axes.spines.right": False,
        "legend.frameon": False,
    })


def italicize_gene(gene: str) -> str:
    """
    Format gene symbol for matplotlib (italicized per biology convention).

    Examples
    --------
    >>> italicize_gene("TP53")
    '$\\\\mathit{TP53}$'
    """
    return f"$\\mathit{{{gene}}}$"
