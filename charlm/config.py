"""
Configuration for training and generation.

Shared by the command-line trainer and the web API so both start from the
same defaults.
"""

from dataclasses import dataclass, fields
from typing import Optional


@dataclass
class ModelConfig:
    """
    Settings of one training and generation run.

    Attributes:
        window_length: Number of characters in a context window
        seed: Random seed, None for non-reproducible generation
        text_length: Number of characters to generate
        initial_text: Text to start generating from (defaults to the start
            of the corpus)
        lowercase: Whether to lowercase the corpus before training
        encoding: Encoding of corpus files
        max_text_length: Upper bound on text_length accepted by the web API
    """
    window_length: int = 3
    seed: Optional[int] = None
    text_length: int = 200
    initial_text: Optional[str] = None
    lowercase: bool = False
    encoding: str = "utf-8"
    max_text_length: int = 5000

    def validate(self) -> "ModelConfig":
        if self.window_length < 1:
            raise ValueError("window_length must be at least 1")
        if self.text_length < 0:
            raise ValueError("text_length must not be negative")
        return self

    @classmethod
    def from_dict(cls, data: dict) -> "ModelConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})
