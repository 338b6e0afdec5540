"""K-fold cross-validation over a lambda path and lambda selection."""

import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from scipy.special import expit
from sklearn.metrics import log_loss
from sklearn.model_selection import KFold, StratifiedKFold
from tqdm import tqdm

from line_stylometry.core.constants import MAX_ITER, N_FOLDS, RANDOM_SEED, TOLERANCE
from line_stylometry.core.errors import DegenerateClassError
from .path import LassoPath, _as_csr, fit_lasso_path

logger = logging.getLogger(__name__)


def assign_folds(y, n_folds: int = N_FOLDS, seed: int = RANDOM_SEED) -> np.ndarray:
    """
    Assign every sample to one of ``n_folds`` folds.

    Folds are stratified by label when each class has at least ``n_folds``
    members, otherwise samples are shuffled into plain k-fold groups. The
    number of folds never exceeds the number of samples.

    Args:
        y: Binary labels
        n_folds: Requested number of folds
        seed: Random seed for reproducibility

    Returns:
        Integer fold id per sample (0 .. n_folds - 1)

    Examples:
        >>> assign_folds(np.array([0, 1, 0, 1, 0, 1]), n_folds=3, seed=42)
    """
    y = np.asarray(y)
    n_samples = len(y)
    n_folds = min(n_folds, n_samples)

    if n_folds < 2:
        raise DegenerateClassError(f"Cross-validation needs at least 2 samples, got {n_samples}")

    _, class_counts = np.unique(y, return_counts=True)
    if class_counts.min() >= n_folds:
        splitter = StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=seed)
    else:
        splitter = KFold(n_splits=n_folds, shuffle=True, random_state=seed)

    fold_ids = np.empty(n_samples, dtype=int)
    for fold, (_, test_idx) in enumerate(splitter.split(np.zeros(n_samples), y)):
        fold_ids[test_idx] = fold

    return fold_ids


def _fold_deviance(X, y, fold_ids, fold, lambdas, max_iter, tol, seed) -> Optional[np.ndarray]:
    """Held-out mean binomial deviance per lambda, or None if the fold is unusable."""
    train = fold_ids != fold
    test = ~train

    if np.unique(y[train]).size < 2:
        return None

    path = fit_lasso_path(X[train], y[train], lambdas, max_iter=max_iter, tol=tol, seed=seed)
    probabilities = expit(path.linear_predictor(X[test]))

    return np.array([
        2.0 * log_loss(y[test], probabilities[:, k], labels=[0, 1])
        for k in range(len(lambdas))
    ])


def run_cross_validation(
    X,
    y,
    lambdas: np.ndarray,
    n_folds: int = N_FOLDS,
    seed: int = RANDOM_SEED,
    n_jobs: int = 1,
    full_path: Optional[LassoPath] = None,
    max_iter: int = MAX_ITER,
    tol: float = TOLERANCE
) -> pd.DataFrame:
    """
    Estimate out-of-fold deviance for every lambda.

    For each fold:
    1. Fit the whole lambda path on the other folds
    2. Compute mean binomial deviance on the held-out fold

    Folds whose training part holds a single class are skipped. Fold results
    are combined in fold order, so running folds in parallel (``n_jobs``)
    gives the same answer as running them one at a time.

    Args:
        X: Feature matrix (n_samples × n_features)
        y: Binary labels (0/1)
        lambdas: Decreasing penalty strengths shared by all folds
        n_folds: Number of folds
        seed: Random seed for fold assignment and the solver
        n_jobs: Number of folds to fit concurrently (joblib)
        full_path: Path fitted on all rows, used for the ``nzero`` column

    Returns:
        DataFrame with one row per lambda and columns:
        - lambda: penalty strength
        - cvm: fold-size weighted mean deviance
        - cvsd: standard error of cvm
        - cvup / cvlo: cvm ± cvsd
        - nzero: nonzero coefficients in ``full_path`` (NaN if not given)

    Raises:
        DegenerateClassError: If fewer than two folds are usable
    """
    X = _as_csr(X)
    y = np.asarray(y)
    fold_ids = assign_folds(y, n_folds=n_folds, seed=seed)
    folds = np.unique(fold_ids)

    results = Parallel(n_jobs=n_jobs)(
        delayed(_fold_deviance)(X, y, fold_ids, fold, lambdas, max_iter, tol, seed)
        for fold in tqdm(folds, desc="CV folds")
    )

    usable = [(fold, dev) for fold, dev in zip(folds, results) if dev is not None]
    skipped = len(folds) - len(usable)
    if skipped:
        logger.warning(f"Skipped {skipped} of {len(folds)} folds whose training rows hold a single class")

    if len(usable) < 2:
        raise DegenerateClassError(
            f"Only {len(usable)} usable cross-validation folds; need at least 2"
        )

    cvraw = np.vstack([dev for _, dev in usable])
    weights = np.array([np.sum(fold_ids == fold) for fold, _ in usable], dtype=float)

    cvm = np.average(cvraw, axis=0, weights=weights)
    cvsd = np.sqrt(np.average((cvraw - cvm) ** 2, axis=0, weights=weights) / (len(usable) - 1))

    nzero = full_path.nonzero_counts() if full_path is not None else np.full(len(lambdas), np.nan)

    return pd.DataFrame({
        'lambda': lambdas,
        'cvm': cvm,
        'cvsd': cvsd,
        'cvup': cvm + cvsd,
        'cvlo': cvm - cvsd,
        'nzero': nzero,
    })


def select_lambdas(cv_results: pd.DataFrame) -> Tuple[float, float]:
    """
    Pick lambda.min and lambda.1se from cross-validation results.

    lambda.min is the largest lambda attaining the minimum mean deviance;
    lambda.1se is the largest lambda whose mean deviance is within one
    standard error of that minimum.

    Returns:
        (lambda_min, lambda_1se)
    """
    lambdas = cv_results['lambda'].to_numpy()
    cvm = cv_results['cvm'].to_numpy()
    cvsd = cv_results['cvsd'].to_numpy()

    lambda_min = lambdas[cvm <= cvm.min()].max()
    idx_min = int(np.flatnonzero(lambdas == lambda_min)[0])

    threshold = cvm[idx_min] + cvsd[idx_min]
    lambda_1se = lambdas[cvm <= threshold].max()

    return float(lambda_min), float(lambda_1se)
