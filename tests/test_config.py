"""
Tests for the configuration dataclass.
"""

import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from charlm.config import ModelConfig


class TestModelConfig(unittest.TestCase):
    """Tests for ModelConfig."""

    def test_defaults(self):
        config = ModelConfig()
        self.assertEqual(config.window_length, 3)
        self.assertIsNone(config.seed)
        self.assertEqual(config.text_length, 200)
        self.assertFalse(config.lowercase)

    def test_validate(self):
        self.assertIsInstance(ModelConfig(window_length=1).validate(), ModelConfig)
        with self.assertRaises(ValueError):
            ModelConfig(window_length=0).validate()
        with self.assertRaises(ValueError):
            ModelConfig(text_length=-1).validate()

    def test_from_dict(self):
        config = ModelConfig.from_dict({'window_length': 5, 'seed': 9, 'unknown': True})
        self.assertEqual(config.window_length, 5)
        self.assertEqual(config.seed, 9)

    def test_from_dict_skips_none(self):
        config = ModelConfig.from_dict({'window_length': None, 'text_length': 10})
        self.assertEqual(config.window_length, 3)
        self.assertEqual(config.text_length, 10)


if __name__ == '__main__':
    unittest.main()
