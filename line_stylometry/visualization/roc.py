"""Generate the ROC curve of the held-out predictions."""

import seaborn as sns
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path

from line_stylometry.classification.evaluation import compute_auc, compute_roc_curve


def generate_roc_figure(
    probabilities,
    output_path=None,
    figsize=(6, 6),
    font='Helvetica'
):
    """
    Plot the ROC curve of test-set probabilities, with the AUC in the title.

    Args:
        probabilities: Test probability table (probability, is_positive)
        output_path: Path to save PDF (optional)
        figsize: Figure size
        font: Font family to use

    Returns:
        matplotlib figure object

    Raises:
        DegenerateClassError: If the test set contains a single class
    """
    # Set font
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    curve = compute_roc_curve(probabilities)
    auc = compute_auc(probabilities)

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(curve['fpr'], curve['tpr'], color='black', linewidth=1.5)
    ax.plot([0, 1], [0, 1], color='gray', linestyle='--', linewidth=0.8)

    ax.set_xlim(0, 1)
    ax.set_ylim(0, 1)
    ax.set_aspect('equal')
    ax.set_xlabel('False positive rate', fontsize=14)
    ax.set_ylabel('True positive rate', fontsize=14)
    ax.set_title(f'AUC = {auc:.3f}', fontsize=14)
    sns.despine(ax=ax, top=True, right=True)

    fig.tight_layout()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight", format="pdf")

    return fig
