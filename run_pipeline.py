#!/usr/bin/env python
"""
CLI for line-stylometry: classify which of two books each line came from.
"""

import sys
import argparse
import logging
from pathlib import Path

# Set matplotlib to non-interactive backend
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from line_stylometry.cli_utils import safe_print, format_header, format_table, format_lines
from line_stylometry.core.constants import (
    BOOK_TITLES, DEFAULT_OUTPUT_DIR, DEFAULT_TITLES, MIN_WORD_COUNT, N_FOLDS,
    N_LAMBDA, POSITIVE_TITLE, RANDOM_SEED, TRAIN_PROP
)
from line_stylometry.core.errors import PipelineError

logger = logging.getLogger(__name__)


def generate_figures(results, output_dir):
    """Write every figure for a finished run; returns the number written."""
    from line_stylometry.visualization import (
        generate_word_frequency_figure,
        generate_coefficient_figure,
        generate_cv_deviance_figure,
        generate_roc_figure
    )

    negative_title = [t for t in results.titles if t != results.positive_title][0]
    clf = results.classifier

    figures = [
        ('Word frequencies', 'word_frequencies.pdf',
         lambda path: generate_word_frequency_figure(results.tokens, results.documents, output_path=path)),
        ('Coefficients', 'coefficients.pdf',
         lambda path: generate_coefficient_figure(
             results.coefficients, results.positive_title, negative_title, output_path=path)),
        ('Cross-validation curve', 'cv_deviance.pdf',
         lambda path: generate_cv_deviance_figure(
             clf.cv_results_, clf.lambda_min_, clf.lambda_1se_, output_path=path)),
        ('ROC curve', 'roc_curve.pdf',
         lambda path: generate_roc_figure(results.probabilities, output_path=path)),
    ]

    count = 0
    for description, filename, generate_func in figures:
        path = Path(output_dir) / filename
        fig = generate_func(str(path))
        plt.close(fig)
        safe_print(f"  ✓ {description}: {path}")
        count += 1

    return count


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description='line-stylometry CLI: LASSO classification of lines from two books',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Pride and Prejudice vs. The War of the Worlds
  %(prog)s --data-dir data/raw          # Read {gutenberg_id}.txt files instead of downloading
  %(prog)s --titles Emma "The Time Machine" --positive Emma
  %(prog)s --inspect 10                 # Show confidently misclassified lines
  %(prog)s --list-titles                # List known titles
        """
    )

    parser.add_argument('--titles', nargs=2, default=DEFAULT_TITLES, metavar='TITLE',
                        help='The two works to compare')
    parser.add_argument('--positive', default=None,
                        help=f'Title treated as the positive class (default: first title, {POSITIVE_TITLE!r})')
    parser.add_argument('--data-dir', '-d', default=None,
                        help='Directory of {gutenberg_id}.txt files (default: download from Project Gutenberg)')
    parser.add_argument('--min-count', type=int, default=MIN_WORD_COUNT,
                        help=f'Keep words occurring more than this many times (default: {MIN_WORD_COUNT})')
    parser.add_argument('--train-prop', type=float, default=TRAIN_PROP,
                        help=f'Fraction of lines used for training (default: {TRAIN_PROP})')
    parser.add_argument('--folds', type=int, default=N_FOLDS,
                        help=f'Cross-validation folds (default: {N_FOLDS})')
    parser.add_argument('--n-lambda', type=int, default=N_LAMBDA,
                        help=f'Length of the lambda path (default: {N_LAMBDA})')
    parser.add_argument('--seed', type=int, default=RANDOM_SEED,
                        help=f'Random seed (default: {RANDOM_SEED})')
    parser.add_argument('--jobs', '-j', type=int, default=1,
                        help='Cross-validation folds fitted in parallel (default: 1)')
    parser.add_argument('--output', '-o', default=str(DEFAULT_OUTPUT_DIR),
                        help=f'Output directory for reports and figures (default: {DEFAULT_OUTPUT_DIR})')
    parser.add_argument('--no-figures', action='store_true',
                        help='Skip figure generation')
    parser.add_argument('--inspect', type=int, default=0, metavar='N',
                        help='Print N sampled confidently misclassified lines per book')
    parser.add_argument('--list-titles', '-l', action='store_true',
                        help='List titles known to the catalog')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.list_titles:
        print("\nAvailable titles (Gutenberg ID: title):")
        for book_id, title in BOOK_TITLES.items():
            safe_print(f"  {book_id:>6}: {title}")
        return 0

    from line_stylometry.classification import run_classification_experiment, sample_misclassified
    from line_stylometry.corpus import DirectorySource, GutenbergSource

    titles = list(args.titles)
    positive_title = args.positive or titles[0]
    source = DirectorySource(args.data_dir) if args.data_dir else GutenbergSource()

    safe_print(format_header("line-stylometry"))
    safe_print(f"Positive class: {positive_title}")
    safe_print(f"Compared with:  {[t for t in titles if t != positive_title]}")

    try:
        results = run_classification_experiment(
            titles=titles,
            positive_title=positive_title,
            source=source,
            min_count=args.min_count,
            train_prop=args.train_prop,
            n_folds=args.folds,
            n_lambda=args.n_lambda,
            seed=args.seed,
            n_jobs=args.jobs,
            output_dir=args.output
        )
    except PipelineError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 2

    summary = results.summary()

    print("\n" + "=" * 60)
    print("Results")
    print("=" * 60)
    print(f"Documents: {summary['n_documents']} ({summary['n_train']} train / {summary['n_test']} test)")
    print(f"Terms:     {summary['n_terms']}")
    print(f"lambda.min = {summary['lambda_min']:.5g} ({summary['n_nonzero_lambda_min']} nonzero terms)")
    print(f"lambda.1se = {summary['lambda_1se']:.5g} ({summary['n_nonzero_lambda_1se']} nonzero terms)")
    print(f"Test AUC:  {results.auc:.4f}")
    safe_print("\nConfusion matrix (rows: true title, columns: predicted title):")
    safe_print(format_table(results.confusion))

    if args.inspect:
        negative_title = [t for t in titles if t != positive_title][0]
        checks = [
            (f"{negative_title} lines predicted as {positive_title} (p > 0.8)",
             dict(title=negative_title, min_probability=0.8)),
            (f"{positive_title} lines predicted as {negative_title} (p < 0.3)",
             dict(title=positive_title, max_probability=0.3)),
        ]
        for description, selection in checks:
            sample = sample_misclassified(
                results.probabilities, results.documents, n=args.inspect, seed=args.seed, **selection
            )
            safe_print(f"\n{description}:")
            safe_print(format_lines(sample))

    if not args.no_figures:
        print("\n" + "=" * 60)
        print("Generating Figures")
        print("=" * 60)
        generate_figures(results, args.output)

    safe_print(f"\nReports saved in: {args.output}/")
    return 0


if __name__ == "__main__":
    sys.exit(main())
