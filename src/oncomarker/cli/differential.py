"""
CLI for tumor-vs-normal differential expression of a gene panel.

Runs a Welch t-test per gene with Benjamini-Hochberg correction, assigns
significance categories and renders a volcano plot.

Usage:
    oncomarker differential \\
        --normal raw_data/BC-TCGA-Normal.txt \\
        --tumor raw_data/BC-TCGA-Tumor.txt \\
        --cohort TCGA-BRCA \\
        --genes ESR1,PGR,ERBB2,MKI67,TP53,BRCA1,BRCA2,PTEN \\
        --output results/brca

Outputs (in --output):
    differential_expression.csv   Gene, Log2FC, PValue, FDR, Category
    volcano.png                   Volcano plot (unless --no-plot)
    run_summary.json              Parameters and category counts
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime

from oncomarker.cli._inputs import add_input_arguments, load_input_panel, resolve_args
from oncomarker.cli._validators import _n_jobs, _positive_float, _probability


def setup_parser(subparsers: argparse._SubParsersAction) -> None:
    """Add the differential subcommand to the parser."""
    parser = subparsers.add_parser(
        "differential",
        help="Tumor-vs-normal differential expression (Welch t-test + BH FDR)",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        # Config merging recognizes explicit options by their full spelling
        allow_abbrev=False,
    )
    add_input_arguments(parser)

    parser.add_argument(
        "--fc-threshold",
        type=_positive_float,
        default=1.0,
        help="Absolute Log2FC cutoff for Up/Downregulated (default: 1.0)",
    )
    parser.add_argument(
        "--p-threshold",
        type=_probability,
        default=0.05,
        help="Raw p-value cutoff for Up/Downregulated (default: 0.05)",
    )
    parser.add_argument(
        "--n-jobs", "-j",
        type=_n_jobs,
        default=1,
        help="Parallel jobs for per-gene tests (-1 = all cores, default: 1)",
    )
    parser.add_argument(
        "--no-plot",
        action="store_true",
        help="Skip the volcano plot",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of top genes to print (default: 10)",
    )

    parser.set_defaults(func=run_differential)


def run_differential(args: argparse.Namespace) -> int:
    """Execute the differential expression analysis."""
    from oncomarker.core.panel import UnknownGeneError
    from oncomarker.io.writers import write_results
    from oncomarker.stats import InsufficientSamplesError, classify, differential_expression
    from oncomarker.stats.classify import CATEGORIES
    from oncomarker.utils.fileio import atomic_write_json

    try:
        args = resolve_args(args)
        panel = load_input_panel(args)
    except (FileNotFoundError, ValueError, UnknownGeneError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=" * 70)
    print("  Differential Expression Analysis (Welch t-test, BH FDR)")
    print("=" * 70)
    print(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print()
    print(panel.describe())
    print()

    try:
        results = differential_expression(panel, n_jobs=args.n_jobs)
    except InsufficientSamplesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    classified = classify(results, fc_threshold=args.fc_threshold, p_threshold=args.p_threshold)

    args.output.mkdir(parents=True, exist_ok=True)
    results_path = write_results(classified, args.output / "differential_expression.csv")
    print(f"Results: {results_path}")

    if not args.no_plot:
        from oncomarker.viz import configure_style, plot_volcano

        configure_style()
        fig = plot_volcano(
            results,
            cohort_label=panel.cohort_label,
            fc_threshold=args.fc_threshold,
            p_threshold=args.p_threshold,
        )
        plot_path = fig.save(args.output / "volcano.png")
        fig.close()
        print(f"Volcano plot: {plot_path}")

    counts = classified['Category'].value_counts().reindex(list(CATEGORIES), fill_value=0)
    summary = {
        'command': 'differential',
        'cohort': panel.cohort_label,
        'n_genes': panel.n_genes,
        'n_samples': panel.n_samples,
        'fc_threshold': args.fc_threshold,
        'p_threshold': args.p_threshold,
        'n_undefined_pvalues': int(results['PValue'].isna().sum()),
        'n_fdr_significant': int((results['FDR'] < args.p_threshold).sum()),
        'category_counts': {k: int(v) for k, v in counts.items()},
        'completed_at': datetime.now().isoformat(),
    }
    atomic_write_json(args.output / "run_summary.json", summary)

    print()
    print("Category counts:")
    for category, count in summary['category_counts'].items():
        print(f"  {category}: {count}")
    print()
    print(f"Top {args.top} genes by p-value:")
    print(classified.head(args.top).to_string(index=False))

    return 0
