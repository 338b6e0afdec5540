"""Corpus loading from Project Gutenberg or local text files."""

from .sources import GutenbergSource, DirectorySource, resolve_title, strip_gutenberg_boilerplate
from .loader import Document, load_corpus, documents_to_frame, split_documents

__all__ = [
    'GutenbergSource',
    'DirectorySource',
    'resolve_title',
    'strip_gutenberg_boilerplate',
    'Document',
    'load_corpus',
    'documents_to_frame',
    'split_documents',
]
