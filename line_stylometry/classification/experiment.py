"""High-level runner for the two-book line classification experiment."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from line_stylometry.core.constants import (
    DEFAULT_TITLES, MIN_WORD_COUNT, N_FOLDS, N_LAMBDA, POSITIVE_TITLE,
    PROBABILITY_THRESHOLD, RANDOM_SEED, TRAIN_PROP
)
from line_stylometry.corpus import Document, GutenbergSource, load_corpus, split_documents
from .tokenizer import tokenize_documents, filter_vocabulary
from .matrix import build_term_matrix, build_label_vector
from .classifier import LassoLogisticCV
from .evaluation import score_documents, attach_titles, compute_auc, confusion_matrix

logger = logging.getLogger(__name__)


@dataclass
class ClassificationResults:
    """
    Everything produced by one run.

    The four reporting artifacts are ``coefficients``, ``probabilities``,
    ``auc`` and ``confusion``; the rest is kept for figures and inspection.
    """

    titles: List[str]
    positive_title: str
    documents: List[Document]
    tokens: pd.DataFrame
    train_ids: Tuple[int, ...]
    test_ids: Tuple[int, ...]
    classifier: LassoLogisticCV
    coefficients: pd.DataFrame
    probabilities: pd.DataFrame
    auc: float
    confusion: pd.DataFrame

    def summary(self) -> dict:
        clf = self.classifier
        return {
            'titles': self.titles,
            'positive_title': self.positive_title,
            'n_documents': len(self.documents),
            'n_train': len(self.train_ids),
            'n_test': len(self.test_ids),
            'n_terms': int(len(clf.terms_)),
            'lambda_min': clf.lambda_min_,
            'lambda_1se': clf.lambda_1se_,
            'n_nonzero_lambda_min': len(clf.nonzero_terms('lambda_min')),
            'n_nonzero_lambda_1se': len(clf.nonzero_terms('lambda_1se')),
            'auc': self.auc,
        }


def run_classification_experiment(
    titles: Sequence[str] = DEFAULT_TITLES,
    positive_title: str = POSITIVE_TITLE,
    source=None,
    min_count: int = MIN_WORD_COUNT,
    train_prop: float = TRAIN_PROP,
    n_folds: int = N_FOLDS,
    n_lambda: int = N_LAMBDA,
    seed: int = RANDOM_SEED,
    n_jobs: int = 1,
    threshold: float = PROBABILITY_THRESHOLD,
    output_dir: Optional[str] = None
) -> ClassificationResults:
    """
    Run the complete line classification experiment.

    Steps:
    1. Load both books, one document per line
    2. Tokenize and apply the corpus-wide frequency filter
    3. Split document ids into training and test sets
    4. Build the training term matrix and aligned labels
    5. Fit the cross-validated LASSO classifier
    6. Score the test set at lambda.1se; compute AUC and confusion matrix
    7. Optionally save the reports

    Args:
        titles: The two work titles
        positive_title: Title encoded as the positive class
        source: Corpus source (defaults to GutenbergSource())
        min_count: Vocabulary filter threshold (words must occur more often)
        train_prop: Fraction of lines used for training
        n_folds: Cross-validation folds
        n_lambda: Length of the lambda path
        seed: Random seed for the split, folds and solver
        n_jobs: Folds to fit concurrently
        threshold: Probability cut-off for hard predictions
        output_dir: If given, reports are written there

    Returns:
        ClassificationResults

    Raises:
        ValueError: If titles are not two distinct works including positive_title
        PipelineError: Any stage failure (resolution, alignment, degenerate
            classes, empty vocabulary)

    Examples:
        >>> results = run_classification_experiment()
        >>> print(results.auc)
    """
    titles = list(dict.fromkeys(titles))
    if len(titles) != 2:
        raise ValueError(f"Exactly two distinct titles are required, got {titles}")
    if positive_title not in titles:
        raise ValueError(f"Positive title {positive_title!r} is not one of {titles}")

    if source is None:
        source = GutenbergSource()

    # Step 1: Load books
    documents = load_corpus(titles, source)
    logger.info(f"Loaded {len(documents)} lines from {len(titles)} books")

    # Step 2: Tokenize and filter
    tokens = filter_vocabulary(tokenize_documents(documents), min_count=min_count)

    # Step 3: Split
    train_ids, test_ids = split_documents(documents, train_prop=train_prop, seed=seed)
    logger.info(f"Split: {len(train_ids)} training / {len(test_ids)} test documents")

    # Step 4: Matrix and labels
    term_matrix = build_term_matrix(tokens, train_ids)
    labels = build_label_vector(term_matrix.document_ids, documents, positive_title)

    # Step 5: Fit
    classifier = LassoLogisticCV(n_folds=n_folds, n_lambda=n_lambda, seed=seed, n_jobs=n_jobs)
    classifier.fit(term_matrix, labels)
    coefficients = classifier.coefficients('lambda_1se')

    # Step 6: Evaluate
    scores = score_documents(tokens, coefficients, test_ids)
    probabilities = attach_titles(scores, documents, positive_title)
    auc = compute_auc(probabilities)
    confusion = confusion_matrix(probabilities, titles, positive_title, threshold=threshold)
    logger.info(f"Test AUC: {auc:.4f}")

    results = ClassificationResults(
        titles=titles,
        positive_title=positive_title,
        documents=documents,
        tokens=tokens,
        train_ids=train_ids,
        test_ids=test_ids,
        classifier=classifier,
        coefficients=coefficients,
        probabilities=probabilities,
        auc=auc,
        confusion=confusion,
    )

    # Step 7: Save
    if output_dir is not None:
        save_classification_results(results, output_dir)

    return results


def save_classification_results(results: ClassificationResults, output_dir: str) -> str:
    """
    Write the report tables of a run.

    Files:
    - coefficients.csv: term, estimate at lambda.1se
    - probabilities.csv: document_id, score, probability, title, is_positive
    - confusion_matrix.csv: true title × predicted title
    - cv_results.csv: cross-validation table per lambda
    - summary.json: sizes, lambdas and AUC

    Returns:
        Path to the output directory
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    results.coefficients.to_csv(output_path / 'coefficients.csv', index=False)
    results.probabilities.to_csv(output_path / 'probabilities.csv', index=False)
    results.confusion.to_csv(output_path / 'confusion_matrix.csv')
    results.classifier.cv_results_.to_csv(output_path / 'cv_results.csv', index=False)

    with open(output_path / 'summary.json', 'w') as f:
        json.dump(results.summary(), f, indent=2)

    logger.info(f"Reports written to {output_path}")
    return str(output_path)
