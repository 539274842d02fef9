"""
Corpus Loading and Preprocessing

This module supplies training text to the language model: a character
stream over strings or files, simple text normalization, and access to
the Brown corpus through NLTK.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple, Union

import nltk
from nltk.corpus import brown


logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")

# Characters read from disk per chunk by CharStream.from_file
READ_CHUNK_SIZE = 64 * 1024


class CharStream:
    """
    Sequential reader over a source of characters.

    Wraps any iterable of single characters (a str included) and exposes
    it as a stream with one character of lookahead, so callers can ask
    whether more input remains before reading it.
    """

    def __init__(self, source: Iterable[str]):
        try:
            self.length: Optional[int] = len(source)
        except TypeError:
            self.length = None

        self._iter = iter(source)
        self._next: Optional[str] = None
        self._exhausted = False
        self.chars_read = 0
        self._advance()

    @classmethod
    def from_file(cls, path: Union[str, Path], encoding: str = "utf-8") -> "CharStream":
        """Open a text file and stream its characters, newlines included."""
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Corpus file not found: {path}")

        logger.debug("Streaming corpus from %s", path)
        return cls(_iter_file_chars(path, encoding))

    def _advance(self) -> None:
        try:
            self._next = next(self._iter)
        except StopIteration:
            self._next = None
            self._exhausted = True

    def is_empty(self) -> bool:
        """Return True when no characters remain."""
        return self._exhausted

    def read_char(self) -> str:
        """Read and return the next character."""
        if self._exhausted:
            raise EOFError("Attempted to read past the end of the character stream")

        char = self._next
        self._advance()
        self.chars_read += 1
        return char

    def __iter__(self) -> Iterator[str]:
        while not self.is_empty():
            yield self.read_char()


def _iter_file_chars(path: Path, encoding: str) -> Iterator[str]:
    # newline="" keeps line endings exactly as they appear in the file
    with open(path, "r", encoding=encoding, newline="") as f:
        while True:
            chunk = f.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            yield from chunk


def ensure_nltk_data():
    """Download required NLTK data if not present."""
    try:
        nltk.data.find('corpora/brown')
    except LookupError:
        logger.info("Downloading Brown corpus...")
        nltk.download('brown', quiet=True)


def preprocess_text(text: str, lowercase: bool = False,
                    collapse_whitespace: bool = False) -> str:
    """
    Normalize raw text before training.

    Args:
        text: Raw input text
        lowercase: Whether to lowercase the text
        collapse_whitespace: Whether to replace runs of whitespace with a
            single space

    Returns:
        The normalized text
    """
    if lowercase:
        text = text.lower()

    if collapse_whitespace:
        text = _WHITESPACE_RE.sub(" ", text).strip()

    return text


def load_brown_text(categories: Optional[List[str]] = None,
                    lowercase: bool = True) -> Tuple[str, dict]:
    """
    Load the Brown corpus as a single training string.

    Args:
        categories: Optional list of Brown corpus categories to load
                   (e.g., ['news', 'fiction', 'science_fiction'])
                   If None, loads all categories.
        lowercase: Whether to lowercase the text

    Returns:
        Tuple of (corpus text, corpus statistics dict)
    """
    ensure_nltk_data()

    if categories:
        words = brown.words(categories=categories)
    else:
        words = brown.words()

    text = preprocess_text(" ".join(words), lowercase=lowercase)

    stats = {
        'num_words': len(words),
        'num_characters': len(text),
        'categories': categories or brown.categories()
    }

    logger.debug("Loaded %d Brown corpus characters", stats['num_characters'])
    return text, stats


def get_brown_categories() -> List[str]:
    """Return list of available Brown corpus categories."""
    ensure_nltk_data()
    return brown.categories()
