#!/usr/bin/env python3
"""
Character Language Model Training Script

Train a character-level Markov model on a text file (or the Brown corpus)
and generate random text from it.

Usage:
    python train.py --file corpus.txt --window-length 4 --length 300
    python train.py --categories news fiction --seed 42
    python train.py --file corpus.txt --interactive
"""

import argparse
import sys

from rich.markup import escape

from charlm import InsufficientInputError, ModelConfig
from charlm.corpus import get_brown_categories
from charlm.training import (
    console, interactive_demo, setup_logging, show_generation, show_model,
    train_model_cli
)


def build_parser() -> argparse.ArgumentParser:
    defaults = ModelConfig()

    parser = argparse.ArgumentParser(
        description="Train a character-level language model and generate text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --file shakespeare.txt --window-length 7 --length 500
  %(prog)s --file shakespeare.txt --seed 20 --initial-text "ROMEO"
  %(prog)s --categories news fiction --show-model
  %(prog)s --file corpus.txt --interactive  # Interactive demo after training

With the same --seed, the same corpus and the same arguments, the
generated text is identical from run to run.
        """
    )

    parser.add_argument(
        '-w', '--window-length',
        type=int,
        default=defaults.window_length,
        help=f'Length of the context window (default: {defaults.window_length})'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=defaults.seed,
        help='Random seed for reproducible generation (default: none)'
    )

    parser.add_argument(
        '-f', '--file',
        type=str,
        default=None,
        help='Text file to train on (default: the Brown corpus)'
    )

    parser.add_argument(
        '-c', '--categories',
        type=str,
        nargs='+',
        default=None,
        help='Brown corpus categories to use when no file is given (default: all)'
    )

    parser.add_argument(
        '--lowercase',
        action='store_true',
        help='Lowercase the corpus before training'
    )

    parser.add_argument(
        '--encoding',
        type=str,
        default=defaults.encoding,
        help=f'Encoding of the corpus file (default: {defaults.encoding})'
    )

    parser.add_argument(
        '-t', '--initial-text',
        type=str,
        default=defaults.initial_text,
        help='Text to start generating from (default: start of the corpus)'
    )

    parser.add_argument(
        '-l', '--length',
        type=int,
        default=defaults.text_length,
        help=f'Number of characters to generate (default: {defaults.text_length})'
    )

    parser.add_argument(
        '--show-model',
        action='store_true',
        help='Print every context of the trained model'
    )

    parser.add_argument(
        '-i', '--interactive',
        action='store_true',
        help='Run interactive demo after training'
    )

    parser.add_argument(
        '--list-categories',
        action='store_true',
        help='List available Brown corpus categories and exit'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show debug logging'
    )

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    # List categories and exit
    if args.list_categories:
        console.print("Available Brown corpus categories:")
        for cat in get_brown_categories():
            console.print(f"  - {cat}")
        return 0

    config = ModelConfig(
        window_length=args.window_length,
        seed=args.seed,
        text_length=args.length,
        initial_text=args.initial_text,
        lowercase=args.lowercase,
        encoding=args.encoding
    )

    try:
        model = train_model_cli(config, path=args.file, categories=args.categories)
    except (InsufficientInputError, FileNotFoundError, ValueError) as e:
        console.print("[red]Error:[/red]", escape(str(e)), highlight=False)
        return 1

    if args.show_model:
        show_model(model)

    initial_text = config.initial_text
    if initial_text is None:
        # start from the first window that was seen in training
        initial_text = next(iter(model.contexts), "")
    show_generation(model, initial_text, config.text_length)

    if args.interactive:
        interactive_demo(model, text_length=config.text_length)

    return 0


if __name__ == '__main__':
    sys.exit(main())
