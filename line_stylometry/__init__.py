"""Which book did this line come from? LASSO classification of book lines."""

__version__ = "0.1.0"
