"""Corpus loading: one Document per line of each requested book."""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from line_stylometry.core.constants import RANDOM_SEED, TRAIN_PROP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """A single line of a book, identified corpus-wide by ``document_id``."""

    document_id: int
    title: str
    raw_text: str


def load_corpus(titles: Iterable[str], source) -> List[Document]:
    """
    Fetch each title and number every line across the combined corpus.

    Ids start at 1 and follow the order of ``titles`` then line order within
    each book, so identical input always yields identical ids. Repeated
    titles are fetched once.

    Args:
        titles: Work titles to load
        source: Object with a ``fetch(title) -> List[str]`` method
            (GutenbergSource or DirectorySource)

    Returns:
        List of Document records ordered by document_id

    Raises:
        DataResolutionError: If a title cannot be resolved by the source

    Examples:
        >>> docs = load_corpus(["Pride and Prejudice"], DirectorySource("data/raw"))
        >>> docs[0].document_id
        1
    """
    unique_titles = list(dict.fromkeys(titles))

    documents = []
    for title in unique_titles:
        lines = source.fetch(title)
        logger.info(f"Loaded {len(lines)} lines of {title!r}")

        offset = len(documents)
        documents.extend(
            Document(document_id=offset + i + 1, title=title, raw_text=line)
            for i, line in enumerate(lines)
        )

    return documents


def documents_to_frame(documents: Sequence[Document]) -> pd.DataFrame:
    """Tabulate documents as (document_id, title, raw_text)."""
    return pd.DataFrame(
        [(d.document_id, d.title, d.raw_text) for d in documents],
        columns=['document_id', 'title', 'raw_text']
    )


def split_documents(
    documents: Sequence[Document],
    train_prop: float = TRAIN_PROP,
    seed: int = RANDOM_SEED
) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """
    Split document ids into training and test sets, stratified by title.

    Args:
        documents: Corpus documents
        train_prop: Fraction of documents used for training
        seed: Random seed for reproducibility

    Returns:
        (train_ids, test_ids), each a sorted tuple of document ids

    Raises:
        ValueError: If train_prop is not strictly between 0 and 1
    """
    if not 0 < train_prop < 1:
        raise ValueError(f"train_prop must be between 0 and 1, got {train_prop}")

    ids = [d.document_id for d in documents]
    titles = [d.title for d in documents]

    train_ids, test_ids = train_test_split(
        ids,
        train_size=train_prop,
        stratify=titles,
        random_state=seed
    )

    return tuple(sorted(train_ids)), tuple(sorted(test_ids))
