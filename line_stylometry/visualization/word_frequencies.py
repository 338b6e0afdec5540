"""Generate the most-frequent-words bar chart for each book."""

import seaborn as sns
import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
from pathlib import Path

from line_stylometry.classification.tokenizer import count_words


def generate_word_frequency_figure(
    tokens,
    documents,
    output_path=None,
    top_n=20,
    figsize=(12, 6),
    font='Helvetica'
):
    """
    Generate side-by-side bar charts of each book's most frequent words.

    Stop words are removed for this figure only; the classifier sees them.

    Args:
        tokens: Token table (document_id, word)
        documents: Corpus documents (for titles)
        output_path: Path to save PDF (optional)
        top_n: Words shown per book
        figsize: Figure size
        font: Font family to use

    Returns:
        matplotlib figure object
    """
    # Set font
    plt.rcParams['font.family'] = font
    plt.rcParams['font.sans-serif'] = [font]

    counts = count_words(tokens, documents)
    top = counts.groupby('title').head(top_n)
    titles = list(dict.fromkeys(d.title for d in documents))

    palette = sns.color_palette("tab10", n_colors=max(len(titles), 1))
    fig, axes = plt.subplots(1, len(titles), figsize=figsize, squeeze=False)

    for ax, title, color in zip(axes[0], titles, palette):
        book = top[top['title'] == title]
        sns.barplot(data=book, x='n', y='word', color=color, ax=ax)
        ax.set_title(title, fontsize=14)
        ax.set_xlabel('Count', fontsize=12)
        ax.set_ylabel('')
        sns.despine(ax=ax, top=True, right=True)

    fig.tight_layout()

    if output_path:
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, bbox_inches="tight", format="pdf")

    return fig
