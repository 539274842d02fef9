"""
Character-level Markov Language Model

This module contains the LanguageModel class: a fixed-window Markov model
over characters, trained by sliding a window across a corpus and used to
generate text by weighted sampling of the next character.
"""

import logging
import random
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from .corpus import CharStream
from .frequency import FrequencyTable


logger = logging.getLogger(__name__)

# Characters scanned between two progress callback invocations
PROGRESS_INTERVAL = 10_000

ProgressCallback = Callable[[int, Optional[int], str], None]


class LanguageModelError(Exception):
    """Base class for language model errors."""


class InsufficientInputError(LanguageModelError, ValueError):
    """Raised when a corpus is too short to fill the initial window."""


class LanguageModel:
    """
    Character-level Markov Language Model

    Maps every window of window_length characters seen in the training
    text to a FrequencyTable of the characters that followed it.

    Attributes:
        window_length: Number of characters in a context window
        seed: Seed of the model's random generator (None when unseeded)
        contexts: Window string -> FrequencyTable, in discovery order
    """

    def __init__(self, window_length: int, seed: Optional[int] = None):
        """
        Initialize the language model.

        Args:
            window_length: Length of the context window (at least 1)
            seed: Seed for reproducible generation. Without one, every
                model produces different random texts.
        """
        if not isinstance(window_length, int) or isinstance(window_length, bool):
            raise ValueError("window_length must be an integer")
        if window_length < 1:
            raise ValueError("window_length must be at least 1")

        self.window_length = window_length
        self.seed = seed
        self._random = random.Random(seed) if seed is not None else random.Random()

        self.contexts: Dict[str, FrequencyTable] = {}

        # Training stats
        self.is_trained = False
        self.training_stats: Dict = {}

    def train(self, corpus: Union[CharStream, Iterable[str]],
              progress_callback: Optional[ProgressCallback] = None) -> Dict:
        """
        Train the model on a corpus, read once and in order.

        Counts from previous calls are kept and added to. The scan is done
        on fresh tables that are merged into the model only once the corpus
        has been read completely, so a failing call leaves the model as it
        was.

        Args:
            corpus: A CharStream or any iterable of characters
            progress_callback: Optional callback(current, total, stage)

        Returns:
            Dictionary of training statistics

        Raises:
            InsufficientInputError: if the corpus has fewer than
                window_length characters
        """
        stream = corpus if isinstance(corpus, CharStream) else CharStream(corpus)
        total = stream.length

        window = ""
        for _ in range(self.window_length):
            if stream.is_empty():
                raise InsufficientInputError(
                    f"Corpus has {len(window)} characters, "
                    f"need at least {self.window_length} to fill the window"
                )
            window += stream.read_char()

        logger.debug("Training window_length=%d model", self.window_length)

        if progress_callback:
            progress_callback(0, total, "Scanning corpus")

        scanned: Dict[str, FrequencyTable] = {}
        while not stream.is_empty():
            char = stream.read_char()

            table = scanned.get(window)
            if table is None:
                table = FrequencyTable()
                scanned[window] = table
            table.update(char)

            window = window[1:] + char

            if progress_callback and stream.chars_read % PROGRESS_INTERVAL == 0:
                progress_callback(stream.chars_read, total, "Scanning corpus")

        if progress_callback:
            progress_callback(stream.chars_read, total, "Computing probabilities")

        self._merge(scanned)
        for table in self.contexts.values():
            self.calculate_probabilities(table)

        self.is_trained = True
        previous_chars = self.training_stats.get('characters_read', 0)
        self.training_stats = {
            'window_length': self.window_length,
            'seed': self.seed,
            'characters_read': previous_chars + stream.chars_read,
            'unique_contexts': len(self.contexts),
            'total_transitions': sum(t.total_count() for t in self.contexts.values()),
            'vocab_size': len(self._vocabulary())
        }

        logger.debug("Trained on %d characters, %d contexts",
                     stream.chars_read, len(self.contexts))

        if progress_callback:
            progress_callback(stream.chars_read, total, "Complete")

        return self.training_stats

    def _merge(self, scanned: Dict[str, FrequencyTable]) -> None:
        for window, new_table in scanned.items():
            table = self.contexts.get(window)
            if table is None:
                self.contexts[window] = new_table
                continue
            for entry in new_table:
                table.update(entry.char, entry.count)

    def _vocabulary(self) -> set:
        vocab = set()
        for window, table in self.contexts.items():
            vocab.update(window)
            vocab.update(entry.char for entry in table)
        return vocab

    def calculate_probabilities(self, table: FrequencyTable) -> None:
        """Compute and set the p and cp fields of every entry in table."""
        table.calculate_probabilities()

    def get_random_char(self, table: FrequencyTable) -> str:
        """Return a character drawn from table according to its probabilities."""
        return table.sample(self._random.random())

    def generate(self, initial_text: str, text_length: int) -> str:
        """
        Generate random text from the learned probabilities.

        Args:
            initial_text: Text to start from. Only its last window_length
                characters are used and returned as the start of the result.
            text_length: Maximum number of characters to append

        Returns:
            The seed window followed by the generated characters. If
            initial_text is shorter than the window it is returned as is;
            generation stops early at a window never seen in training.
        """
        if len(initial_text) < self.window_length:
            return initial_text

        window = initial_text[-self.window_length:]
        generated = [window]

        for _ in range(text_length):
            table = self.contexts.get(window)
            if table is None:
                break

            char = self.get_random_char(table)
            generated.append(char)
            window = window[1:] + char

        return "".join(generated)

    def probability(self, char: str, window: str) -> float:
        """Return P(char | window), 0.0 for an unseen window or character."""
        table = self.contexts.get(window)
        if table is None:
            return 0.0

        index = table.index_of(char)
        return table.get(index).p if index != -1 else 0.0

    def get_next_char_distribution(self, window: str,
                                   top_k: Optional[int] = None) -> List[Tuple[str, float]]:
        """
        Get the probability distribution over next characters for a window.

        Args:
            window: The context window
            top_k: Number of top characters to return (all when None)

        Returns:
            List of (char, probability) tuples, sorted by probability
        """
        table = self.contexts.get(window)
        if table is None:
            return []

        # sort is stable, equal probabilities keep insertion order
        probs = sorted(((e.char, e.p) for e in table), key=lambda x: x[1], reverse=True)
        return probs if top_k is None else probs[:top_k]

    def get_top_contexts(self, top_k: int = 100) -> List[Tuple[str, int]]:
        """Get the most frequent windows with their total counts."""
        counts = [(window, table.total_count()) for window, table in self.contexts.items()]
        counts.sort(key=lambda x: x[1], reverse=True)
        return counts[:top_k]

    def describe(self) -> str:
        """Return one "<window> : <table>" line per context."""
        return "".join(f"{window} : {table}\n" for window, table in self.contexts.items())

    def __str__(self) -> str:
        return self.describe()
