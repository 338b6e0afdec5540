"""Generate the bar chart of the largest LASSO coefficients."""

import pandas as pd
import seaborn as sns
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path

from line_stylometry.core.constants import INTERCEPT_TERM


def top_coefficients(coefficients: pd.DataFrame, top_n: int = 10) -> pd.DataFrame:
    """
    Largest positive and most negative estimates, intercept excluded.

    Returns:
        DataFrame (term, estimate, direction) sorted by estimate
    """
    terms = coefficients[coefficients['term'] != INTERCEPT_TERM]
    positive = terms[terms['estimate'] > 0].nlargest(top_n, 'estimate')
    negative = terms[terms['estimate'] < 0].nsmallest(top_n, 'estimate')

    top = pd.concat([positive, negative], ignore_index=True)
    top['direction'] = top['estimate'].gt(0).map({True: 'positive', False: 'negative'})
    return top.sort_values('estimate').reset_index(drop=True)


def generate_coefficient_figure(
    coefficients,
    positive_title,
    negative_title,
    output_path=None,
    top_n=10,
    figsize=(8, 6),
    font='Helvetica'
):
    """
    Generate a horizontal bar chart of the words that most increase and most
    decrease the probability of the positive book.

    Args:
        coefficients: Coefficient table (term, estimate)
        positive_title: Book encoded as the positive class
        negative_title: The other book
        output_path: Path to save PDF (optional)
        top_n: Words shown in each direction
        figsize: Figure size
        font: Font family to use

    Returns:
        matplotlib figure object
    """
    # Set font
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    top = top_coefficients(coefficients, top_n=top_n)
    labels = {'positive': positive_title, 'negative': negative_title}
    top['book'] = top['direction'].map(labels)

    base_colors = sns.color_palette("tab10", n_colors=2)
    palette = {positive_title: base_colors[0], negative_title: base_colors[1]}

    fig, ax = plt.subplots(figsize=figsize)
    if top.empty:
        # Intercept-only model
        ax.text(0.5, 0.5, 'No nonzero coefficients', ha='center', va='center', transform=ax.transAxes)
    else:
        sns.barplot(
            data=top,
            x='estimate',
            y='term',
            hue='book',
            palette=palette,
            dodge=False,
            ax=ax
        )

    ax.axvline(0, color='black', linewidth=0.8)
    ax.set_xlabel('Coefficient', fontsize=14)
    ax.set_ylabel('')
    ax.tick_params(axis='both', labelsize=12)
    sns.despine(ax=ax, top=True, right=True)

    if ax.get_legend() is not None:
        ax.legend(fontsize=11, title=None, loc='lower right', frameon=False)

    fig.tight_layout()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight", format="pdf")

    return fig
