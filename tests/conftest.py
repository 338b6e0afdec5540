"""
Pytest configuration and shared fixtures.

Real data only: a two-book fixture corpus in Gutenberg format under
tests/fixtures/corpus, plus small generated corpora built in memory.
"""

import random
from pathlib import Path

import pytest

from line_stylometry.corpus import Document, DirectorySource, load_corpus
from line_stylometry.classification import tokenize_documents

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "corpus"

FIXTURE_TITLES = ['Pride and Prejudice', 'The War of the Worlds']

MARTIAN_WORDS = ['martian', 'cylinder', 'tripod', 'heat', 'ray', 'pit', 'smoke', 'artillery']
REGENCY_WORDS = ['elizabeth', 'darcy', 'bingley', 'netherfield', 'ball', 'sister', 'fortune', 'marriage']
SHARED_WORDS = ['the', 'and', 'of', 'to', 'a', 'was', 'in', 'he']


def make_documents(n_per_title=40, seed=0, title_a='A', title_b='B'):
    """
    Generate two clearly separable classes of short documents.

    Every document mixes three class-specific words with three shared ones.
    """
    rng = random.Random(seed)
    documents = []
    for title, words in [(title_a, MARTIAN_WORDS), (title_b, REGENCY_WORDS)]:
        for _ in range(n_per_title):
            text = ' '.join(rng.sample(words, 3) + rng.sample(SHARED_WORDS, 3))
            documents.append(Document(len(documents) + 1, title, text.capitalize() + '.'))
    return documents


@pytest.fixture
def fixture_source():
    """DirectorySource over the fixture ebooks."""
    return DirectorySource(FIXTURE_DIR)


@pytest.fixture
def fixture_documents(fixture_source):
    """Documents of both fixture books."""
    return load_corpus(FIXTURE_TITLES, fixture_source)


@pytest.fixture
def toy_documents():
    """Four documents: two about Mars (A), two about a ball (B)."""
    return [
        Document(1, 'A', 'Martian invasion, Mars!'),
        Document(2, 'A', 'martian mars'),
        Document(3, 'B', 'Elizabeth Darcy ball.'),
        Document(4, 'B', 'elizabeth darcy ball'),
    ]


@pytest.fixture
def separable_documents():
    """80 generated documents, 40 per class."""
    return make_documents(n_per_title=40, seed=0)


@pytest.fixture
def separable_tokens(separable_documents):
    return tokenize_documents(separable_documents)


@pytest.fixture(scope="session")
def fixture_results():
    """One full experiment over the fixture books, shared across tests."""
    from line_stylometry.classification import run_classification_experiment

    return run_classification_experiment(
        titles=FIXTURE_TITLES,
        positive_title=FIXTURE_TITLES[0],
        source=DirectorySource(FIXTURE_DIR),
        min_count=2,
        n_folds=5,
        n_lambda=20,
        seed=42
    )
