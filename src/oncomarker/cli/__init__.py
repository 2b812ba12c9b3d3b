"""
OncoMarker CLI - Command-line interface for targeted panel analysis.

Commands:
    oncomarker differential  - Tumor-vs-normal differential expression (Welch t-test + BH FDR)
    oncomarker risk          - Median-split risk labels for a single marker gene
"""

import argparse
import logging
import sys
from typing import Optional, List


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI dispatcher for oncomarker."""
    parser = argparse.ArgumentParser(
        prog="oncomarker",
        description="Differential expression and risk stratification for targeted cancer gene panels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  differential  Tumor-vs-normal differential expression (Welch t-test + BH FDR)
  risk          Median-split risk labels for a single marker gene

Examples:
  oncomarker differential --normal BC-TCGA-Normal.txt --tumor BC-TCGA-Tumor.txt --cohort TCGA-BRCA
  oncomarker risk --expression expr.tsv --metadata samples.tsv --gene TP53 --direction high_risk_high_expr
  oncomarker differential --config brca.yaml --n-jobs -1
        """
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Import and register subcommands
    from oncomarker.cli import differential, risk
    differential.setup_parser(subparsers)
    risk.setup_parser(subparsers)

    argv = list(sys.argv[1:] if args is None else args)
    parsed_args = parser.parse_args(argv)

    if parsed_args.command is None:
        parser.print_help()
        return 0

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    # Config merging needs to know which options were typed explicitly
    parsed_args.argv = argv

    # Dispatch to subcommand
    return parsed_args.func(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
