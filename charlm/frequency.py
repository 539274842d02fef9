"""
Frequency Tables for Character Contexts

This module holds the per-window statistics of the language model: an
ordered list of the characters seen after one context window, with their
counts and the probabilities derived from them.
"""

from dataclasses import dataclass
from typing import Iterator, List


@dataclass
class CharData:
    """A character observed after a context, with its count and probabilities."""
    char: str
    count: int = 1
    p: float = 0.0   # probability
    cp: float = 0.0  # cumulative probability

    def __str__(self) -> str:
        return f"({self.char} {self.count} {self.p} {self.cp})"


class FrequencyTable:
    """
    Ordered frequency table of the characters following one window.

    Entries keep the order in which their characters were first seen.
    Sampling scans them in that order, so ties always go to the entry
    that was inserted first.
    """

    def __init__(self):
        self._entries: List[CharData] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CharData]:
        return iter(self._entries)

    def __str__(self) -> str:
        return "(" + " ".join(str(entry) for entry in self._entries) + ")"

    def size(self) -> int:
        return len(self._entries)

    def first(self) -> CharData:
        return self.get(0)

    def get(self, index: int) -> CharData:
        """Return the entry at the given position."""
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"index {index} out of range for table of size {len(self._entries)}")
        return self._entries[index]

    def index_of(self, char: str) -> int:
        """Return the position of char in the table, or -1 if absent."""
        for i, entry in enumerate(self._entries):
            if entry.char == char:
                return i
        return -1

    def update(self, char: str, count: int = 1) -> None:
        """
        Record count more occurrences of char.

        An existing entry is incremented in place; an unseen character is
        appended at the end with zeroed probabilities.
        """
        index = self.index_of(char)
        if index == -1:
            self._entries.append(CharData(char, count))
        else:
            self._entries[index].count += count

    def total_count(self) -> int:
        return sum(entry.count for entry in self._entries)

    def calculate_probabilities(self) -> None:
        """
        Compute p and cp for every entry from the current counts.

        p_i = count_i / T and cp_i = cp_{i-1} + p_i, with T the total count
        of the table. Safe to call repeatedly.
        """
        if not self._entries:
            return

        total = self.total_count()

        first = self._entries[0]
        first.p = first.count / total
        first.cp = first.p

        prev = first
        for entry in self._entries[1:]:
            entry.p = entry.count / total
            entry.cp = prev.cp + entry.p
            prev = entry

    def sample(self, r: float) -> str:
        """
        Return the character selected by the draw r in [0, 1).

        The first entry whose cumulative probability exceeds r wins. When
        rounding leaves the last cp just below r, the last entry is used.
        """
        if not self._entries:
            raise ValueError("Cannot sample from an empty frequency table")

        for entry in self._entries:
            if entry.cp > r:
                return entry.char
        return self._entries[-1].char
