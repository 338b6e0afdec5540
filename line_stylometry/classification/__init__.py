"""Bag-of-words LASSO classification of lines from two books."""

from .tokenizer import Token, tokenize_documents, filter_vocabulary, count_words
from .matrix import TermMatrix, LabelVector, build_term_matrix, project_tokens, build_label_vector, check_alignment
from .path import LassoPath, compute_lambda_path, fit_lasso_path
from .cross_validation import assign_folds, run_cross_validation, select_lambdas
from .classifier import LassoLogisticCV
from .evaluation import (
    score_documents,
    attach_titles,
    compute_auc,
    compute_roc_curve,
    confusion_matrix,
    sample_misclassified,
)
from .experiment import ClassificationResults, run_classification_experiment, save_classification_results

__all__ = [
    'Token',
    'tokenize_documents',
    'filter_vocabulary',
    'count_words',
    'TermMatrix',
    'LabelVector',
    'build_term_matrix',
    'project_tokens',
    'build_label_vector',
    'check_alignment',
    'LassoPath',
    'compute_lambda_path',
    'fit_lasso_path',
    'assign_folds',
    'run_cross_validation',
    'select_lambdas',
    'LassoLogisticCV',
    'score_documents',
    'attach_titles',
    'compute_auc',
    'compute_roc_curve',
    'confusion_matrix',
    'sample_misclassified',
    'ClassificationResults',
    'run_classification_experiment',
    'save_classification_results',
]
