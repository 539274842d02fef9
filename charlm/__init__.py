"""
Character Language Model Package

A fixed-order character-level Markov model: trained by sliding a window
over a text, it generates new text with the same local statistics.
"""

from .model import LanguageModel, LanguageModelError, InsufficientInputError
from .frequency import CharData, FrequencyTable
from .corpus import CharStream, load_brown_text, preprocess_text
from .config import ModelConfig

__version__ = "0.1.0"
__all__ = [
    "LanguageModel", "LanguageModelError", "InsufficientInputError",
    "CharData", "FrequencyTable", "CharStream", "load_brown_text",
    "preprocess_text", "ModelConfig",
]
