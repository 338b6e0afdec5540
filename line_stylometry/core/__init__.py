"""Constants and exceptions shared across line-stylometry."""

from .errors import (
    PipelineError,
    DataResolutionError,
    AlignmentError,
    DegenerateClassError,
    EmptyVocabularyError,
)

__all__ = [
    'PipelineError',
    'DataResolutionError',
    'AlignmentError',
    'DegenerateClassError',
    'EmptyVocabularyError',
]
