"""Shared constants: the Gutenberg catalog and pipeline defaults."""

from pathlib import Path

# Mapping of Project Gutenberg IDs to book titles.
BOOK_TITLES = {
    # Jane Austen
    '105': 'Persuasion',
    '121': 'Northanger Abbey',
    '141': 'Mansfield Park',
    '158': 'Emma',
    '161': 'Sense and Sensibility',
    '1342': 'Pride and Prejudice',
    '946': 'Lady Susan',

    # L. Frank Baum
    '54': 'The Wonderful Wizard of Oz',
    '955': 'The Marvelous Land of Oz',
    '957': 'Ozma of Oz',

    # Charles Dickens
    '98': 'A Tale of Two Cities',
    '730': 'Oliver Twist',
    '1400': 'Great Expectations',
    '24022': 'A Christmas Carol',

    # Herman Melville
    '15': 'Moby-Dick; or, The Whale',
    '11231': 'Bartleby, the Scrivener: A Story of Wall-Street',

    # Mark Twain
    '74': 'The Adventures of Tom Sawyer, Complete',
    '76': 'Adventures of Huckleberry Finn',

    # H.G. Wells
    '35': 'The Time Machine',
    '36': 'The War of the Worlds',
    '159': 'The island of Doctor Moreau',
    '5230': 'The Invisible Man: A Grotesque Romance',
    '52501': 'The First Men in the Moon',
}

# Default pair of works to tell apart; the first is the positive class
POSITIVE_TITLE = 'Pride and Prejudice'
DEFAULT_TITLES = [POSITIVE_TITLE, 'The War of the Worlds']

# Source of raw text
GUTENBERG_URL = "https://www.gutenberg.org/cache/epub/{book_id}/pg{book_id}.txt"
REQUEST_TIMEOUT = 60

# Tokenizer / vocabulary filter
MIN_WORD_COUNT = 10

# Train/test split
TRAIN_PROP = 0.75

# Cross-validated LASSO
N_FOLDS = 10
N_LAMBDA = 100
MAX_ITER = 5000
TOLERANCE = 1e-4

# Evaluation
PROBABILITY_THRESHOLD = 0.5
INTERCEPT_TERM = '(Intercept)'

RANDOM_SEED = 42

DEFAULT_OUTPUT_DIR = Path("results")
