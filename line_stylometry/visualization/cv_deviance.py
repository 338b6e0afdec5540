"""Generate the cross-validation curve: deviance against log(lambda)."""

import numpy as np
import seaborn as sns
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path


def generate_cv_deviance_figure(
    cv_results,
    lambda_min,
    lambda_1se,
    output_path=None,
    figsize=(8, 5),
    font='Helvetica'
):
    """
    Plot mean CV deviance ± one standard error along the lambda path.

    Dashed vertical lines mark lambda.min and lambda.1se.

    Args:
        cv_results: DataFrame from run_cross_validation
        lambda_min: Selected lambda.min
        lambda_1se: Selected lambda.1se
        output_path: Path to save PDF (optional)
        figsize: Figure size
        font: Font family to use

    Returns:
        matplotlib figure object
    """
    # Set font
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    log_lambda = np.log(cv_results['lambda'].to_numpy())

    fig, ax = plt.subplots(figsize=figsize)
    ax.errorbar(
        log_lambda,
        cv_results['cvm'],
        yerr=cv_results['cvsd'],
        fmt='o',
        color='firebrick',
        ecolor='gray',
        markersize=3,
        elinewidth=0.8,
        capsize=1.5
    )

    for value, label in [(lambda_min, 'lambda.min'), (lambda_1se, 'lambda.1se')]:
        ax.axvline(np.log(value), color='black', linestyle='--', linewidth=0.8)
        ax.text(np.log(value), ax.get_ylim()[1], label, rotation=90, va='top', ha='right', fontsize=10)

    # Number of nonzero coefficients along the top axis
    if cv_results['nzero'].notna().all():
        top = ax.secondary_xaxis('top')
        ticks = np.linspace(0, len(log_lambda) - 1, min(8, len(log_lambda))).astype(int)
        top.set_xticks(log_lambda[ticks])
        top.set_xticklabels(cv_results['nzero'].to_numpy()[ticks].astype(int))

    ax.set_xlabel('log(lambda)', fontsize=14)
    ax.set_ylabel('Binomial deviance', fontsize=14)
    ax.tick_params(axis='both', labelsize=12)
    sns.despine(ax=ax, top=False, right=True)

    fig.tight_layout()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight", format="pdf")

    return fig
