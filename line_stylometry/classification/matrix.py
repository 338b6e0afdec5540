"""Sparse document-term matrices and document_id-aligned label vectors."""

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd
from scipy.sparse import csr_matrix

from line_stylometry.core.errors import AlignmentError, EmptyVocabularyError
from line_stylometry.corpus.loader import Document, documents_to_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TermMatrix:
    """
    Raw term counts with explicit row and column keys.

    Attributes:
        matrix: CSR matrix (n_documents × n_terms) of counts
        document_ids: Row keys, ascending
        terms: Column keys, ascending
    """

    matrix: csr_matrix
    document_ids: np.ndarray
    terms: np.ndarray

    @property
    def shape(self):
        return self.matrix.shape

    def row_sums(self) -> pd.Series:
        """Total vocabulary words per document, indexed by document_id."""
        sums = np.asarray(self.matrix.sum(axis=1)).ravel()
        return pd.Series(sums, index=self.document_ids, name='n_words')


@dataclass(frozen=True)
class LabelVector:
    """Binary labels keyed by document_id (1 = positive title)."""

    document_ids: np.ndarray
    values: np.ndarray

    def __len__(self):
        return len(self.values)


def count_terms(tokens: pd.DataFrame, document_ids: Iterable[int]) -> pd.DataFrame:
    """
    Aggregate tokens into (document_id, word, count) triples.

    Args:
        tokens: Token table (document_id, word)
        document_ids: Documents to keep

    Returns:
        DataFrame with columns (document_id, word, count)
    """
    wanted = tokens['document_id'].isin(set(document_ids))
    return (
        tokens[wanted]
        .groupby(['document_id', 'word'])
        .size()
        .reset_index(name='count')
    )


def _to_csr(counts: pd.DataFrame, document_ids: np.ndarray, terms: np.ndarray) -> csr_matrix:
    counts = counts[counts['word'].isin(set(terms))]
    rows = pd.Categorical(counts['document_id'], categories=document_ids).codes
    cols = pd.Categorical(counts['word'], categories=terms).codes

    return csr_matrix(
        (counts['count'].to_numpy(dtype=np.float64), (rows, cols)),
        shape=(len(document_ids), len(terms))
    )


def build_term_matrix(tokens: pd.DataFrame, train_ids: Iterable[int]) -> TermMatrix:
    """
    Pivot training tokens into a sparse document-term count matrix.

    Rows are the training documents that contain at least one vocabulary
    word, in ascending document_id order; training documents whose words
    were all filtered out do not get a row. Columns are the vocabulary
    words seen in the training split, in ascending order.

    Args:
        tokens: Filtered token table (document_id, word)
        train_ids: Document ids of the training split

    Returns:
        TermMatrix

    Raises:
        EmptyVocabularyError: If no vocabulary word occurs in the training split

    Examples:
        >>> tm = build_term_matrix(tokens, train_ids)
        >>> tm.shape  # (n_train_documents_with_words, n_terms)
    """
    train_ids = sorted(set(train_ids))
    counts = count_terms(tokens, train_ids)

    if counts.empty:
        raise EmptyVocabularyError(
            f"No vocabulary words in the {len(train_ids)} training documents"
        )

    document_ids = np.array(sorted(counts['document_id'].unique()))
    terms = np.array(sorted(counts['word'].unique()), dtype=object)

    n_dropped = len(train_ids) - len(document_ids)
    if n_dropped:
        logger.info(f"{n_dropped} training documents have no vocabulary words and get no matrix row")

    matrix = _to_csr(counts, document_ids, terms)
    logger.info(f"Term matrix: {matrix.shape[0]} documents x {matrix.shape[1]} terms, {matrix.nnz} nonzero")

    return TermMatrix(matrix=matrix, document_ids=document_ids, terms=terms)


def project_tokens(tokens: pd.DataFrame, document_ids: Sequence[int], terms: np.ndarray) -> TermMatrix:
    """
    Count tokens of arbitrary documents against an existing column space.

    Every requested document gets a row (all zeros when it has no known
    words), in the order given; words outside ``terms`` are ignored.
    """
    document_ids = np.asarray(document_ids)
    counts = count_terms(tokens, document_ids)
    matrix = _to_csr(counts, document_ids, terms)

    return TermMatrix(matrix=matrix, document_ids=document_ids, terms=terms)


def build_label_vector(
    document_ids: Sequence[int],
    documents: Sequence[Document],
    positive_title: str
) -> LabelVector:
    """
    Label each document_id by joining it to its source document.

    Args:
        document_ids: Row keys to label, e.g. TermMatrix.document_ids
        documents: Corpus documents
        positive_title: Title encoded as 1; every other title is 0

    Returns:
        LabelVector in the same order as ``document_ids``

    Raises:
        AlignmentError: If an id has no corresponding document
    """
    keys = pd.DataFrame({'document_id': np.asarray(document_ids)})
    titles = documents_to_frame(documents)[['document_id', 'title']]
    joined = keys.merge(titles, on='document_id', how='left', validate='many_to_one')

    missing = joined.loc[joined['title'].isna(), 'document_id']
    if len(missing):
        raise AlignmentError(f"No document for ids: {missing.tolist()[:10]}")

    values = (joined['title'] == positive_title).astype(int).to_numpy()

    return LabelVector(document_ids=joined['document_id'].to_numpy(), values=values)


def check_alignment(term_matrix: TermMatrix, labels: LabelVector):
    """
    Assert that labels line up one-to-one with the matrix rows.

    Raises:
        AlignmentError: If lengths or document_id order differ
    """
    n_rows = term_matrix.matrix.shape[0]
    if len(labels) != n_rows or len(labels.document_ids) != n_rows:
        raise AlignmentError(
            f"Label vector has {len(labels)} entries but the matrix has {n_rows} rows"
        )

    if not np.array_equal(np.asarray(labels.document_ids), np.asarray(term_matrix.document_ids)):
        raise AlignmentError("Label document_ids are not in matrix row order")
