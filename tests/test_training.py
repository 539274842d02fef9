"""
Tests for the terminal trainer and the train.py entry point.
"""

import io
import tempfile
import unittest
import sys
from pathlib import Path
from unittest import mock

from rich.console import Console

sys.path.insert(0, str(Path(__file__).parent.parent))

import train
from charlm import training
from charlm.config import ModelConfig
from charlm.model import LanguageModel


def capture_console():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TrainingTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = Path(self.tmp.name) / "corpus.txt"
        self.path.write_text("ABABAB", encoding="utf-8")

        self.console = capture_console()
        patcher = mock.patch.object(training, 'console', self.console)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self.tmp.cleanup()

    def output(self):
        return self.console.file.getvalue()


class TestStatsTable(unittest.TestCase):
    """Tests for create_stats_table."""

    def test_rows(self):
        table = training.create_stats_table({'unique_contexts': 1200, 'seed': None})
        self.assertEqual(table.row_count, 2)

        console = capture_console()
        console.print(table)
        out = console.file.getvalue()
        self.assertIn("Unique Contexts", out)
        self.assertIn("1,200", out)


class TestTrainModelCli(TrainingTestCase):
    """Tests for train_model_cli and the display helpers."""

    def test_train_from_file(self):
        model = training.train_model_cli(ModelConfig(window_length=2, seed=3), path=str(self.path))

        self.assertEqual(list(model.contexts), ["AB", "BA"])
        self.assertEqual(model.seed, 3)
        self.assertIn("Training complete", self.output())

    def test_lowercase(self):
        config = ModelConfig(window_length=2, lowercase=True)
        model = training.train_model_cli(config, path=str(self.path))
        self.assertEqual(list(model.contexts), ["ab", "ba"])

    def test_train_from_brown(self):
        stats = {'num_words': 2, 'num_characters': 7, 'categories': ['news']}
        with mock.patch.object(training, 'load_brown_text', return_value=("abababa", stats)) as load:
            model = training.train_model_cli(ModelConfig(window_length=1), categories=['news'])

        load.assert_called_once_with(categories=['news'], lowercase=False)
        self.assertEqual(list(model.contexts), ["a", "b"])

    def test_short_corpus_raises(self):
        from charlm.model import InsufficientInputError

        with self.assertRaises(InsufficientInputError):
            training.train_model_cli(ModelConfig(window_length=10), path=str(self.path))

    def test_show_model(self):
        model = LanguageModel(2)
        model.train("ababab")
        training.show_model(model)
        self.assertIn("ab : ((a 2 1.0 1.0))", self.output())

    def test_show_model_limit(self):
        model = LanguageModel(1)
        model.train("abcdef")
        training.show_model(model, limit=2)
        self.assertIn("3 more contexts", self.output())

    def test_show_generation(self):
        model = LanguageModel(2, seed=1)
        model.train("ababab")
        self.assertEqual(training.show_generation(model, "ab", 4), "ababab")
        self.assertIn("ababab", self.output())


class TestInteractiveDemo(TrainingTestCase):
    """Tests for interactive_demo."""

    def test_session(self):
        model = LanguageModel(2, seed=1)
        model.train("ababab")

        with mock.patch.object(self.console, 'input', side_effect=['a', 'zz', 'xab', 'quit']):
            training.interactive_demo(model, text_length=2)

        out = self.output()
        self.assertIn("Need at least 2 characters", out)
        self.assertIn("never seen", out)
        self.assertIn("abab", out)
        self.assertIn("Goodbye", out)

    def test_interrupt_ends_session(self):
        model = LanguageModel(2)
        with mock.patch.object(self.console, 'input', side_effect=KeyboardInterrupt):
            training.interactive_demo(model)
        self.assertIn("Goodbye", self.output())


class TestMain(TrainingTestCase):
    """Tests for the train.py entry point."""

    def setUp(self):
        super().setUp()
        patcher = mock.patch.object(train, 'console', self.console)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_generate_from_file(self):
        code = train.main(['--file', str(self.path), '-w', '2', '--seed', '4',
                           '--initial-text', 'AB', '--length', '4', '--show-model'])
        self.assertEqual(code, 0)
        self.assertIn("ABABAB", self.output())
        self.assertIn("AB : ((A 2 1.0 1.0))", self.output())

    def test_default_initial_text(self):
        self.assertEqual(train.main(['--file', str(self.path), '-w', '2', '-l', '2']), 0)
        self.assertIn("ABAB", self.output())

    def test_missing_file(self):
        code = train.main(['--file', str(Path(self.tmp.name) / "missing.txt")])
        self.assertEqual(code, 1)
        self.assertIn("Error", self.output())

    def test_corpus_too_short(self):
        code = train.main(['--file', str(self.path), '--window-length', '20'])
        self.assertEqual(code, 1)
        self.assertIn("need at least 20", self.output())

    def test_invalid_window_length(self):
        self.assertEqual(train.main(['--file', str(self.path), '--window-length', '0']), 1)

    def test_list_categories(self):
        with mock.patch.object(train, 'get_brown_categories', return_value=['news', 'humor']):
            self.assertEqual(train.main(['--list-categories']), 0)
        self.assertIn("humor", self.output())


if __name__ == '__main__':
    unittest.main()
