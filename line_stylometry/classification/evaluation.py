"""Scoring held-out documents and summarizing classification quality."""

import logging
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd
from scipy.special import expit
from sklearn.metrics import confusion_matrix as sk_confusion_matrix
from sklearn.metrics import roc_auc_score, roc_curve

from line_stylometry.core.constants import INTERCEPT_TERM, PROBABILITY_THRESHOLD, RANDOM_SEED
from line_stylometry.core.errors import DegenerateClassError
from line_stylometry.corpus.loader import Document, documents_to_frame

logger = logging.getLogger(__name__)


def split_intercept(coefficients: pd.DataFrame):
    """
    Separate the intercept from the term estimates.

    Returns:
        (intercept, DataFrame of nonzero (term, estimate) rows)
    """
    is_intercept = coefficients['term'] == INTERCEPT_TERM
    if is_intercept.sum() != 1:
        raise ValueError(f"Coefficient table must contain exactly one {INTERCEPT_TERM!r} row")

    intercept = float(coefficients.loc[is_intercept, 'estimate'].iloc[0])
    terms = coefficients.loc[~is_intercept & (coefficients['estimate'] != 0), ['term', 'estimate']]

    return intercept, terms


def score_documents(
    tokens: pd.DataFrame,
    coefficients: pd.DataFrame,
    document_ids: Iterable[int]
) -> pd.DataFrame:
    """
    Score documents with a fitted coefficient table.

    Each token occurrence whose word has a nonzero estimate adds that
    estimate to the document's score. The probability is the logistic
    function of intercept + score. Documents without a single matching word
    get score 0 and the intercept-only probability.

    Args:
        tokens: Token table (document_id, word)
        coefficients: Table from LassoLogisticCV.coefficients()
        document_ids: Documents to score

    Returns:
        DataFrame with columns (document_id, score, probability), one row per
        distinct requested id, in the order given

    Examples:
        >>> scores = score_documents(tokens, clf.coefficients(), test_ids)
    """
    intercept, terms = split_intercept(coefficients)
    document_ids = list(dict.fromkeys(document_ids))

    doc_tokens = tokens[tokens['document_id'].isin(set(document_ids))]
    matched = doc_tokens.merge(terms, left_on='word', right_on='term', how='inner', validate='many_to_one')
    scores = matched.groupby('document_id')['estimate'].sum()

    results = pd.DataFrame({'document_id': document_ids})
    results['score'] = results['document_id'].map(scores).fillna(0.0).astype(float)
    results['probability'] = expit(intercept + results['score'].to_numpy())

    n_unmatched = int((~results['document_id'].isin(scores.index)).sum())
    if n_unmatched:
        logger.info(f"{n_unmatched} of {len(results)} documents have no weighted words; scored at the intercept")

    return results


def attach_titles(
    scores: pd.DataFrame,
    documents: Sequence[Document],
    positive_title: str
) -> pd.DataFrame:
    """Join the true title and a binary is_positive column by document_id."""
    titles = documents_to_frame(documents)[['document_id', 'title']]
    results = scores.merge(titles, on='document_id', how='left', validate='one_to_one')

    if results['title'].isna().any():
        missing = results.loc[results['title'].isna(), 'document_id'].tolist()
        raise ValueError(f"Scored ids without a document: {missing[:10]}")

    results['is_positive'] = (results['title'] == positive_title).astype(int)
    return results


def _check_two_classes(results: pd.DataFrame, label_col: str):
    classes = results[label_col].unique()
    if len(classes) < 2:
        raise DegenerateClassError(
            f"AUC is undefined: the test set contains only class {classes.tolist()}"
        )


def compute_auc(results: pd.DataFrame, label_col: str = 'is_positive', score_col: str = 'probability') -> float:
    """
    Area under the ROC curve of probability vs. true label.

    Raises:
        DegenerateClassError: If the results contain a single class
    """
    _check_two_classes(results, label_col)
    return float(roc_auc_score(results[label_col], results[score_col]))


def compute_roc_curve(results: pd.DataFrame, label_col: str = 'is_positive', score_col: str = 'probability') -> pd.DataFrame:
    """ROC curve points as a DataFrame (fpr, tpr, threshold)."""
    _check_two_classes(results, label_col)
    fpr, tpr, thresholds = roc_curve(results[label_col], results[score_col])
    return pd.DataFrame({'fpr': fpr, 'tpr': tpr, 'threshold': thresholds})


def predict_titles(
    results: pd.DataFrame,
    titles: Sequence[str],
    positive_title: str,
    threshold: float = PROBABILITY_THRESHOLD
) -> pd.Series:
    """Hard prediction: the positive title when probability > threshold."""
    negatives = [t for t in titles if t != positive_title]
    if len(titles) != 2 or len(negatives) != 1:
        raise ValueError(f"Expected two titles including {positive_title!r}, got {list(titles)}")

    return pd.Series(
        np.where(results['probability'] > threshold, positive_title, negatives[0]),
        index=results.index,
        name='prediction'
    )


def confusion_matrix(
    results: pd.DataFrame,
    titles: Sequence[str],
    positive_title: str,
    threshold: float = PROBABILITY_THRESHOLD
) -> pd.DataFrame:
    """
    2×2 table of true title (rows) vs. predicted title (columns).

    Both axes list ``titles`` in the order given; cells sum to len(results).
    """
    predictions = predict_titles(results, titles, positive_title, threshold)
    counts = sk_confusion_matrix(results['title'], predictions, labels=list(titles))

    table = pd.DataFrame(counts, index=list(titles), columns=list(titles))
    table.index.name = 'title'
    table.columns.name = 'prediction'
    return table


def sample_misclassified(
    results: pd.DataFrame,
    documents: Sequence[Document],
    title: str,
    min_probability: Optional[float] = None,
    max_probability: Optional[float] = None,
    n: int = 10,
    seed: int = RANDOM_SEED
) -> pd.DataFrame:
    """
    Draw a reproducible sample of documents for manual inspection.

    Keeps documents whose true title is ``title`` and whose probability lies
    strictly inside (min_probability, max_probability), then samples up to
    ``n`` of them.

    Examples:
        >>> # Lines from the negative book the model was sure were positive
        >>> sample_misclassified(results, docs, 'The War of the Worlds', min_probability=0.8)
    """
    mask = results['title'] == title
    if min_probability is not None:
        mask &= results['probability'] > min_probability
    if max_probability is not None:
        mask &= results['probability'] < max_probability

    candidates = results[mask]
    sample = candidates.sample(n=min(n, len(candidates)), random_state=seed)

    text = documents_to_frame(documents)[['document_id', 'raw_text']]
    return sample.merge(text, on='document_id', how='left', validate='one_to_one')
