"""Input options shared by the analysis subcommands.

A panel is loaded either from two group files (``--normal`` and
``--tumor``) or from an expression table plus a metadata table
(``--expression`` and ``--metadata``). Every option can also come from a
``--config`` file; explicit command-line values win.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from oncomarker.cli._validators import _gene_list
from oncomarker.cli.config import load_config, merge_config_with_args
from oncomarker.core.panel import GenePanel

logger = logging.getLogger(__name__)


def add_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the panel input options on a subcommand parser."""
    group = parser.add_argument_group("input")
    group.add_argument(
        "--normal",
        type=Path,
        default=None,
        help="Tab-delimited expression file of the normal samples (genes × samples)",
    )
    group.add_argument(
        "--tumor",
        type=Path,
        default=None,
        help="Tab-delimited expression file of the tumor samples (genes × samples)",
    )
    group.add_argument(
        "--expression",
        type=Path,
        default=None,
        help="Expression table (genes × samples). Alternative to --normal/--tumor",
    )
    group.add_argument(
        "--metadata",
        type=Path,
        default=None,
        help="Sample metadata table with a Diagnosis column (used with --expression)",
    )
    group.add_argument(
        "--cohort",
        default="",
        help="Cohort label shown in summaries and plot titles (e.g. TCGA-BRCA)",
    )
    group.add_argument(
        "--genes",
        type=_gene_list,
        default=None,
        help="Comma-separated targeted gene panel (default: all genes)",
    )
    group.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML or JSON config file; explicit options override its values",
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("oncomarker_results"),
        help="Output directory (default: oncomarker_results)",
    )


def resolve_args(args: argparse.Namespace) -> argparse.Namespace:
    """Apply the config file, if any, and check that a panel source is given.

    Raises:
        ValueError: If the inputs are missing or mix both layouts
    """
    if args.config is not None:
        config = load_config(args.config)
        args = merge_config_with_args(config, args, getattr(args, "argv", None))
        logger.info(f"Loaded config: {args.config}")

    group_files = args.normal is not None or args.tumor is not None
    table_files = args.expression is not None or args.metadata is not None

    if group_files and table_files:
        raise ValueError("Use either --normal/--tumor or --expression/--metadata, not both")
    if group_files and (args.normal is None or args.tumor is None):
        raise ValueError("--normal and --tumor must be given together")
    if table_files and (args.expression is None or args.metadata is None):
        raise ValueError("--expression and --metadata must be given together")
    if not (group_files or table_files):
        raise ValueError("No input: give --normal/--tumor, --expression/--metadata, or --config")

    return args


def load_input_panel(args: argparse.Namespace) -> GenePanel:
    """Load the GenePanel described by resolved arguments."""
    from oncomarker.io.loaders import load_group_files, load_panel

    if args.normal is not None:
        return load_group_files(args.normal, args.tumor, cohort_label=args.cohort, genes=args.genes)
    return load_panel(args.expression, args.metadata, cohort_label=args.cohort, genes=args.genes)
