"""Exceptions raised by the classification pipeline.

Every error aborts the run; none of them is recovered from inside the
package. They all derive from ``ValueError`` so callers that only care about
bad input can catch that.
"""


class PipelineError(ValueError):
    """Base class for pipeline failures."""


class DataResolutionError(PipelineError):
    """A requested title matches no known work, or more than one."""


class AlignmentError(PipelineError):
    """Label vector and matrix rows disagree on document_id order or length."""


class DegenerateClassError(PipelineError):
    """Only one class present where two are required (fitting or AUC)."""


class EmptyVocabularyError(PipelineError):
    """No words survive the frequency filter for the training split."""
