"""Sources of raw book text: Project Gutenberg over HTTP, or a local directory."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import requests

from line_stylometry.core.constants import BOOK_TITLES, GUTENBERG_URL, REQUEST_TIMEOUT
from line_stylometry.core.errors import DataResolutionError

logger = logging.getLogger(__name__)

GUTENBERG_START = "*** START OF THE PROJECT GUTENBERG"
GUTENBERG_END = "*** END OF THE PROJECT GUTENBERG"


def _normalize_title(title: str) -> str:
    return " ".join(title.lower().split())


def resolve_title(title: str, catalog: Dict[str, str] = BOOK_TITLES) -> str:
    """
    Resolve a work title to exactly one Gutenberg ID.

    Matching ignores case and repeated whitespace but is otherwise exact.

    Args:
        title: Title of the work (e.g., "Pride and Prejudice")
        catalog: Mapping of Gutenberg ID → title

    Returns:
        The Gutenberg ID as a string

    Raises:
        DataResolutionError: If the title matches no entry or several entries

    Examples:
        >>> resolve_title("the war of the worlds")
        '36'
    """
    wanted = _normalize_title(title)
    matches = [book_id for book_id, name in catalog.items() if _normalize_title(name) == wanted]

    if not matches:
        raise DataResolutionError(f"Unknown title: {title!r}")
    if len(matches) > 1:
        raise DataResolutionError(
            f"Title {title!r} is ambiguous, matches Gutenberg IDs {sorted(matches)}"
        )

    return matches[0]


def strip_gutenberg_boilerplate(text: str) -> List[str]:
    """
    Remove the Project Gutenberg header and footer from a raw ebook.

    Keeps the lines strictly between the START and END markers (the whole
    text when a marker is missing) and strips whitespace from every line.
    Blank lines are kept.

    Args:
        text: Raw ebook text

    Returns:
        List of stripped lines
    """
    # Remove BOM character if present
    text = text.lstrip("\ufeff")

    lines = text.splitlines()
    for i, line in enumerate(lines):
        if GUTENBERG_START in line:
            lines = lines[i + 1:]
            break
    for i, line in enumerate(lines):
        if GUTENBERG_END in line:
            lines = lines[:i]
            break

    lines = [line.strip() for line in lines]

    # Drop blank lines left over at either end of the body
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()

    return lines


class GutenbergSource:
    """
    Fetch book text from the Project Gutenberg cache.

    Attributes:
        catalog: Mapping of Gutenberg ID → title used for resolution
        url_template: URL format string with a ``{book_id}`` field
        timeout: Request timeout in seconds

    Examples:
        >>> source = GutenbergSource()
        >>> lines = source.fetch("The War of the Worlds")
    """

    def __init__(
        self,
        catalog: Dict[str, str] = BOOK_TITLES,
        url_template: str = GUTENBERG_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self.catalog = catalog
        self.url_template = url_template
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, title: str) -> str:
        book_id = resolve_title(title, self.catalog)
        return self.url_template.format(book_id=book_id)

    def fetch(self, title: str) -> List[str]:
        """Download a book and return its body as stripped lines."""
        url = self.url_for(title)
        logger.info(f"Downloading {title!r} from {url}")

        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        response.encoding = 'utf-8'

        return strip_gutenberg_boilerplate(response.text)


class DirectorySource:
    """
    Read book text from ``{data_dir}/{book_id}.txt`` files.

    Uses the same title catalog as GutenbergSource, so a directory of
    previously downloaded ebooks behaves exactly like the remote source.
    """

    def __init__(self, data_dir, catalog: Dict[str, str] = BOOK_TITLES):
        self.data_dir = Path(data_dir)
        self.catalog = catalog

    def path_for(self, title: str) -> Path:
        book_id = resolve_title(title, self.catalog)
        return self.data_dir / f"{book_id}.txt"

    def fetch(self, title: str) -> List[str]:
        """Read a book from disk and return its body as stripped lines."""
        path = self.path_for(title)
        if not path.is_file():
            raise DataResolutionError(f"No text file for {title!r} at {path}")

        logger.info(f"Reading {title!r} from {path}")
        text = path.read_text(encoding='utf-8')

        return strip_gutenberg_boilerplate(text)
