"""L1-regularized logistic regression along a path of penalty strengths.

Penalties follow the binomial LASSO objective

    -(1/n) * loglik(b0, b) + lambda * ||b||_1

with the intercept unpenalized. scikit-learn's ``LogisticRegression`` minimizes
``C * sum(loss) + ||b||_1``, so each lambda is fit with ``C = 1 / (n * lambda)``.
Columns are scaled to unit standard deviation before fitting and the
coefficients are mapped back to the raw count scale afterwards.
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np
from scipy.sparse import csr_matrix, diags, issparse
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression

from line_stylometry.core.constants import MAX_ITER, N_LAMBDA, RANDOM_SEED, TOLERANCE
from line_stylometry.core.errors import DegenerateClassError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LassoPath:
    """
    Coefficients fitted at every lambda of a path.

    Attributes:
        lambdas: Penalty strengths, decreasing (n_lambda,)
        coefs: Raw-scale coefficients (n_lambda × n_features)
        intercepts: Intercepts (n_lambda,)
    """

    lambdas: np.ndarray
    coefs: np.ndarray
    intercepts: np.ndarray

    def nonzero_counts(self) -> np.ndarray:
        return (self.coefs != 0).sum(axis=1)

    def linear_predictor(self, X) -> np.ndarray:
        """Linear predictor for every row and lambda (n_samples × n_lambda)."""
        return np.asarray(X @ self.coefs.T) + self.intercepts


def _as_csr(X) -> csr_matrix:
    return X.tocsr() if issparse(X) else csr_matrix(X)


def column_scale(X) -> np.ndarray:
    """Population standard deviation of each column (1 for constant columns)."""
    X = _as_csr(X)
    mean = np.asarray(X.mean(axis=0)).ravel()
    mean_sq = np.asarray(X.multiply(X).mean(axis=0)).ravel()
    sd = np.sqrt(np.maximum(mean_sq - mean ** 2, 0.0))
    sd[sd == 0] = 1.0
    return sd


def _check_binary(y):
    classes = np.unique(y)
    if classes.size < 2:
        raise DegenerateClassError(
            f"Need both classes to fit, got only {classes.tolist()} in {len(y)} labels"
        )


def compute_lambda_path(X, y, n_lambda: int = N_LAMBDA, lambda_min_ratio: float = None) -> np.ndarray:
    """
    Build a decreasing, log-spaced lambda sequence.

    Starts at the smallest lambda for which every coefficient is zero,
    ``max|Xs'(y - mean(y))| / n`` on the standardized matrix, and ends at
    ``lambda_max * lambda_min_ratio``.

    Args:
        X: Feature matrix (n_samples × n_features)
        y: Binary labels
        n_lambda: Number of lambdas
        lambda_min_ratio: Ratio of smallest to largest lambda; defaults to
            0.01 when n_samples < n_features, else 1e-4

    Returns:
        Array of lambdas, largest first
    """
    X = _as_csr(X)
    y = np.asarray(y, dtype=float)
    _check_binary(y)

    n_samples, n_features = X.shape
    if lambda_min_ratio is None:
        lambda_min_ratio = 0.01 if n_samples < n_features else 1e-4

    Xs = X @ diags(1.0 / column_scale(X))
    gradient = np.abs(Xs.T @ (y - y.mean())) / n_samples
    lambda_max = float(gradient.max())

    if lambda_max <= 0:
        raise ValueError("No feature is associated with the labels; cannot build a lambda path")

    return lambda_max * np.logspace(0, np.log10(lambda_min_ratio), n_lambda)


def fit_lasso_path(
    X,
    y,
    lambdas: np.ndarray,
    max_iter: int = MAX_ITER,
    tol: float = TOLERANCE,
    seed: int = RANDOM_SEED
) -> LassoPath:
    """
    Fit the L1 logistic model at every lambda, warm-starting each fit.

    Args:
        X: Feature matrix (n_samples × n_features)
        y: Binary labels (0/1)
        lambdas: Decreasing penalty strengths
        max_iter: Solver iteration limit per lambda
        tol: Solver tolerance
        seed: Seed for the saga solver's sample shuffling

    Returns:
        LassoPath with raw-scale coefficients

    Raises:
        DegenerateClassError: If y contains a single class
    """
    X = _as_csr(X)
    y = np.asarray(y)
    _check_binary(y)

    n_samples, n_features = X.shape
    scale = column_scale(X)
    Xs = X @ diags(1.0 / scale)

    model = LogisticRegression(
        penalty='l1',
        solver='saga',
        warm_start=True,
        max_iter=max_iter,
        tol=tol,
        random_state=seed
    )

    coefs = np.zeros((len(lambdas), n_features))
    intercepts = np.zeros(len(lambdas))
    n_unconverged = 0

    for k, lam in enumerate(lambdas):
        model.set_params(C=1.0 / (n_samples * lam))
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always', ConvergenceWarning)
            model.fit(Xs, y)
        n_unconverged += sum(issubclass(w.category, ConvergenceWarning) for w in caught)

        coefs[k] = model.coef_.ravel() / scale
        intercepts[k] = model.intercept_[0]

    if n_unconverged:
        logger.warning(f"saga did not converge for {n_unconverged}/{len(lambdas)} lambdas (max_iter={max_iter})")

    return LassoPath(lambdas=np.asarray(lambdas), coefs=coefs, intercepts=intercepts)
