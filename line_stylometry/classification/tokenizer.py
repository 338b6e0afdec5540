"""Word tokenization and corpus-wide frequency filtering."""

import logging
from typing import NamedTuple, Optional, Sequence

import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer, ENGLISH_STOP_WORDS

from line_stylometry.core.constants import MIN_WORD_COUNT
from line_stylometry.corpus.loader import Document, documents_to_frame

logger = logging.getLogger(__name__)

# Runs of letters/digits, keeping internal apostrophes ("don't") and
# dropping underscores used for italics in Gutenberg texts
WORD_PATTERN = r"(?u)[^\W_]+(?:['’][^\W_]+)*"


class Token(NamedTuple):
    """One occurrence of a word in a document."""

    document_id: int
    word: str


def create_word_analyzer():
    """
    Build the CountVectorizer analyzer that splits text into words.

    Returns:
        Callable mapping a string to a list of lower-cased word tokens
    """
    vectorizer = CountVectorizer(
        lowercase=True,
        token_pattern=WORD_PATTERN,
        stop_words=None  # Stop words are kept for modeling
    )
    return vectorizer.build_analyzer()


def tokenize_documents(documents: Sequence[Document]) -> pd.DataFrame:
    """
    Split every document into lower-cased word tokens.

    Args:
        documents: Corpus documents

    Returns:
        DataFrame with columns (document_id, word), one row per occurrence,
        in document order then word order

    Examples:
        >>> tokens = tokenize_documents([Document(1, "A", "The Martians came!")])
        >>> tokens['word'].tolist()
        ['the', 'martians', 'came']
    """
    analyzer = create_word_analyzer()

    tokens = [
        Token(document.document_id, word)
        for document in documents
        for word in analyzer(document.raw_text)
    ]

    return pd.DataFrame(tokens, columns=list(Token._fields))


def filter_vocabulary(tokens: pd.DataFrame, min_count: int = MIN_WORD_COUNT) -> pd.DataFrame:
    """
    Keep only words whose total corpus count exceeds ``min_count``.

    The count is taken over the whole corpus, before any train/test split,
    so the vocabulary also reflects test documents.

    Args:
        tokens: Token table from tokenize_documents
        min_count: Words must occur strictly more often than this (0 keeps all)

    Returns:
        Filtered token table with the same columns and order
    """
    if tokens.empty:
        return tokens.copy()

    word_counts = tokens.groupby('word')['word'].transform('size')
    kept = tokens[word_counts > min_count].reset_index(drop=True)

    logger.info(
        f"Vocabulary filter (count > {min_count}): "
        f"{tokens['word'].nunique()} -> {kept['word'].nunique()} words"
    )

    return kept


def count_words(
    tokens: pd.DataFrame,
    documents: Optional[Sequence[Document]] = None,
    stop_words=ENGLISH_STOP_WORDS
) -> pd.DataFrame:
    """
    Count words for descriptive plots, with stop words removed.

    Args:
        tokens: Token table
        documents: If given, counts are broken down by the documents' titles
        stop_words: Collection of words to drop (None keeps everything)

    Returns:
        DataFrame with columns ([title,] word, n) sorted by descending n
    """
    if stop_words is not None:
        tokens = tokens[~tokens['word'].isin(set(stop_words))]

    if documents is None:
        counts = tokens.groupby('word').size().reset_index(name='n')
        return counts.sort_values(['n', 'word'], ascending=[False, True]).reset_index(drop=True)

    titles = documents_to_frame(documents)[['document_id', 'title']]
    merged = tokens.merge(titles, on='document_id', how='inner', validate='many_to_one')
    counts = merged.groupby(['title', 'word']).size().reset_index(name='n')

    return counts.sort_values(['title', 'n', 'word'], ascending=[True, False, True]).reset_index(drop=True)
