"""Visualization modules for line-stylometry."""

from .word_frequencies import generate_word_frequency_figure
from .coefficients import generate_coefficient_figure, top_coefficients
from .cv_deviance import generate_cv_deviance_figure
from .roc import generate_roc_figure

__all__ = [
    'generate_word_frequency_figure',
    'generate_coefficient_figure',
    'top_coefficients',
    'generate_cv_deviance_figure',
    'generate_roc_figure',
]
