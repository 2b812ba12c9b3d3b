"""
CLI for single-biomarker risk stratification.

Splits the cohort at the median expression of one gene. The direction
says which side of the median is "High Risk":

    low_risk_high_expr    tumor suppressor: below median -> High Risk
    high_risk_high_expr   oncogene:         above median -> High Risk

Usage:
    oncomarker risk \\
        --normal raw_data/BC-TCGA-Normal.txt \\
        --tumor raw_data/BC-TCGA-Tumor.txt \\
        --cohort TCGA-BRCA \\
        --gene TP53 --direction low_risk_high_expr \\
        --output results/brca

Outputs (in --output):
    risk_<GENE>.csv   Sample metadata with an added Risk column
"""

from __future__ import annotations

import argparse
import sys

from oncomarker.cli._inputs import add_input_arguments, load_input_panel, resolve_args
from oncomarker.stats.risk import RiskDirection


def setup_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the risk subcommand to the parser."""
    parser = subparsers.add_parser(
        "risk",
        help="Median-split risk labels for a single marker gene",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        # Config merging recognizes explicit options by their full spelling
        allow_abbrev=False,
    )
    add_input_arguments(parser)

    # Not required=True: the gene may come from --config
    parser.add_argument(
        "--gene", "-g",
        default=None,
        help="Gene symbol to stratify on (e.g. TP53)",
    )
    parser.add_argument(
        "--direction", "-d",
        choices=[d.value for d in RiskDirection],
        default=RiskDirection.LOW_RISK_HIGH_EXPR.value,
        help="Biological role of the gene (default: low_risk_high_expr)",
    )

    parser.set_defaults(func=run_risk)


def run_risk(args: argparse.Namespace) -> int:
    """Execute median-split risk stratification."""
    from oncomarker.core.panel import UnknownGeneError
    from oncomarker.io.writers import write_risk_labels
    from oncomarker.stats.risk import predict_risk, risk_cutoff, summarize_risk

    try:
        args = resolve_args(args)
        if not args.gene:
            raise ValueError("No gene given: use --gene or set 'gene' in the config file")
        panel = load_input_panel(args)
        direction = RiskDirection.parse(args.direction)
        labels = predict_risk(panel, args.gene, direction=direction)
    except (FileNotFoundError, ValueError, UnknownGeneError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(panel.describe())
    print()
    print(f"Gene: {args.gene} ({direction.value})")
    print(f"Median cutoff: {risk_cutoff(panel, args.gene):.4f}")
    print()
    print("Risk groups:")
    for level, count in summarize_risk(labels).items():
        print(f"  {level}: {count}")

    args.output.mkdir(parents=True, exist_ok=True)
    path = write_risk_labels(labels, args.output / f"risk_{args.gene}.csv", metadata=panel.metadata)
    print()
    print(f"Risk labels: {path}")

    return 0
