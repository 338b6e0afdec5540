"""LASSO logistic regression classifier with cross-validated lambda."""

import logging
from typing import List, Union

import numpy as np
import pandas as pd
from scipy.special import expit

from line_stylometry.core.constants import (
    INTERCEPT_TERM, MAX_ITER, N_FOLDS, N_LAMBDA, RANDOM_SEED, TOLERANCE
)
from line_stylometry.core.errors import AlignmentError, DegenerateClassError
from .matrix import LabelVector, TermMatrix, check_alignment
from .path import compute_lambda_path, fit_lasso_path
from .cross_validation import run_cross_validation, select_lambdas

logger = logging.getLogger(__name__)


class LassoLogisticCV:
    """
    Binomial LASSO classifier whose penalty is chosen by k-fold CV.

    Fits the full lambda path on the training matrix, cross-validates the
    same path, and records lambda.min and lambda.1se. Coefficients are
    reported on the raw count scale, so a document's linear predictor is
    simply the intercept plus the sum of its words' estimates.

    Attributes:
        lambdas_: Lambda path (decreasing)
        path_: LassoPath fitted on all training rows
        cv_results_: DataFrame from run_cross_validation
        lambda_min_: Lambda with the lowest CV deviance
        lambda_1se_: Largest lambda within one standard error of the minimum
        terms_: Column keys of the training matrix
        classes_: Array([0, 1]) once fitted

    Examples:
        >>> clf = LassoLogisticCV(n_folds=10, seed=42)
        >>> clf.fit(term_matrix, labels)
        >>> coefs = clf.coefficients('lambda_1se')
    """

    def __init__(
        self,
        n_folds: int = N_FOLDS,
        n_lambda: int = N_LAMBDA,
        lambda_min_ratio: float = None,
        seed: int = RANDOM_SEED,
        n_jobs: int = 1,
        max_iter: int = MAX_ITER,
        tol: float = TOLERANCE
    ):
        self.n_folds = n_folds
        self.n_lambda = n_lambda
        self.lambda_min_ratio = lambda_min_ratio
        self.seed = seed
        self.n_jobs = n_jobs
        self.max_iter = max_iter
        self.tol = tol

        self.lambdas_ = None
        self.path_ = None
        self.cv_results_ = None
        self.lambda_min_ = None
        self.lambda_1se_ = None
        self.terms_ = None
        self.classes_ = None

    def fit(self, term_matrix: TermMatrix, labels: LabelVector):
        """
        Train on a term matrix and its document_id-aligned labels.

        Args:
            term_matrix: Training TermMatrix
            labels: LabelVector with the same document_id order

        Returns:
            self

        Raises:
            AlignmentError: If labels and matrix rows are not aligned
            DegenerateClassError: If only one class is present
        """
        check_alignment(term_matrix, labels)

        X = term_matrix.matrix
        y = np.asarray(labels.values)

        classes = np.unique(y)
        if classes.size < 2:
            raise DegenerateClassError(f"Training labels contain a single class: {classes.tolist()}")

        self.lambdas_ = compute_lambda_path(X, y, n_lambda=self.n_lambda, lambda_min_ratio=self.lambda_min_ratio)

        logger.info(f"Fitting {len(self.lambdas_)} lambdas on {X.shape[0]} documents x {X.shape[1]} terms")
        self.path_ = fit_lasso_path(X, y, self.lambdas_, max_iter=self.max_iter, tol=self.tol, seed=self.seed)

        logger.info(f"Cross-validating with {self.n_folds} folds")
        self.cv_results_ = run_cross_validation(
            X, y, self.lambdas_,
            n_folds=self.n_folds,
            seed=self.seed,
            n_jobs=self.n_jobs,
            full_path=self.path_,
            max_iter=self.max_iter,
            tol=self.tol
        )
        self.lambda_min_, self.lambda_1se_ = select_lambdas(self.cv_results_)

        self.terms_ = np.asarray(term_matrix.terms)
        self.classes_ = classes

        logger.info(
            f"lambda.min={self.lambda_min_:.5g} ({len(self.nonzero_terms('lambda_min'))} terms), "
            f"lambda.1se={self.lambda_1se_:.5g} ({len(self.nonzero_terms('lambda_1se'))} terms)"
        )
        return self

    def _check_fitted(self):
        if self.path_ is None:
            raise ValueError("Classifier must be fitted first")

    def _lambda_index(self, which: Union[str, float]) -> int:
        self._check_fitted()
        if which == 'lambda_1se':
            value = self.lambda_1se_
        elif which == 'lambda_min':
            value = self.lambda_min_
        else:
            value = float(which)
        return int(np.argmin(np.abs(self.lambdas_ - value)))

    def coefficients(self, which: Union[str, float] = 'lambda_1se') -> pd.DataFrame:
        """
        Coefficient table at a chosen lambda.

        Args:
            which: 'lambda_1se', 'lambda_min', or a lambda value (nearest
                lambda on the path is used)

        Returns:
            DataFrame with columns (term, estimate): the intercept row first,
            then every term with a nonzero estimate in column order
        """
        k = self._lambda_index(which)
        coefs = self.path_.coefs[k]
        nonzero = np.flatnonzero(coefs)

        return pd.DataFrame({
            'term': [INTERCEPT_TERM] + self.terms_[nonzero].tolist(),
            'estimate': np.concatenate([[self.path_.intercepts[k]], coefs[nonzero]]),
        })

    def nonzero_terms(self, which: Union[str, float] = 'lambda_1se') -> List[str]:
        k = self._lambda_index(which)
        return self.terms_[np.flatnonzero(self.path_.coefs[k])].tolist()

    def intercept(self, which: Union[str, float] = 'lambda_1se') -> float:
        return float(self.path_.intercepts[self._lambda_index(which)])

    def decision_function(self, X, which: Union[str, float] = 'lambda_1se') -> np.ndarray:
        """
        Linear predictor for each row of X.

        Args:
            X: TermMatrix over the training columns, or a raw matrix with the
                same column order
            which: Lambda selector, as in coefficients()
        """
        k = self._lambda_index(which)
        if isinstance(X, TermMatrix):
            if not np.array_equal(np.asarray(X.terms), self.terms_):
                raise AlignmentError("Matrix columns do not match the fitted terms")
            X = X.matrix
        return np.asarray(X @ self.path_.coefs[k]).ravel() + self.path_.intercepts[k]

    def predict_proba(self, X, which: Union[str, float] = 'lambda_1se') -> np.ndarray:
        """Probability of the positive class for each row of X."""
        return expit(self.decision_function(X, which))
