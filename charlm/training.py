"""
Training Module with Rich Terminal UI

This module provides training functionality with terminal progress bars
and status displays using the Rich library.
"""

import logging
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn
)
from rich.table import Table
from rich.text import Text

from .config import ModelConfig
from .corpus import CharStream, load_brown_text
from .model import LanguageModel


console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route log records through Rich on the shared console."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )


def create_stats_table(stats: Dict) -> Table:
    """Create a Rich table displaying training statistics."""
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="green")
    table.add_column("Value", style="yellow", justify="right")

    for key, value in stats.items():
        display_key = key.replace('_', ' ').title()

        if isinstance(value, bool) or value is None:
            display_value = str(value)
        elif isinstance(value, float):
            display_value = f"{value:,.4f}"
        elif isinstance(value, int):
            display_value = f"{value:,}"
        elif isinstance(value, list):
            display_value = f"{len(value)} items"
        else:
            display_value = str(value)

        table.add_row(display_key, display_value)

    return table


def _visible(text: str) -> str:
    return text.replace("\n", "\\n").replace("\t", "\\t")


def train_model_cli(
    config: ModelConfig,
    path: Optional[str] = None,
    categories: Optional[List[str]] = None
) -> LanguageModel:
    """
    Train a character model with terminal output.

    Args:
        config: Model and generation settings
        path: Text file to train on; the Brown corpus is used when None
        categories: Brown corpus categories to use

    Returns:
        Trained LanguageModel
    """
    config.validate()

    console.print()
    console.print(Panel.fit(
        "[bold blue]Character Language Model Training[/bold blue]",
        border_style="blue"
    ))
    console.print()

    config_table = Table(box=box.SIMPLE, show_header=False)
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value", style="white")
    config_table.add_row("Window Length", str(config.window_length))
    config_table.add_row("Seed", str(config.seed) if config.seed is not None else "Random")
    config_table.add_row("Corpus", path or "Brown corpus")
    if not path:
        config_table.add_row("Categories", ", ".join(categories) if categories else "All")
    config_table.add_row("Lowercase", str(config.lowercase))

    console.print(Panel(config_table, title="[bold]Configuration[/bold]", border_style="green"))
    console.print()

    model = LanguageModel(config.window_length, seed=config.seed)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console
    ) as progress:

        # Stage 1: Load corpus
        task = progress.add_task("[cyan]Loading corpus...", total=None)
        if path:
            stream = CharStream.from_file(path, encoding=config.encoding)
            if config.lowercase:
                stream = CharStream(lower for c in stream for lower in c.lower())
        else:
            text, corpus_stats = load_brown_text(categories=categories,
                                                 lowercase=config.lowercase)
            stream = CharStream(text)
        progress.remove_task(task)

        if not path:
            console.print(f"[green]✓[/green] Loaded {corpus_stats['num_words']:,} words "
                          f"({corpus_stats['num_characters']:,} characters)")

        # Stage 2: Train with progress
        train_task = progress.add_task("[cyan]Training model...", total=stream.length)

        def update_progress(current, total, stage=""):
            progress.update(train_task, completed=current, total=total,
                            description=f"[cyan]{stage}")

        stats = model.train(stream, progress_callback=update_progress)
        progress.remove_task(train_task)

    console.print()
    console.print("[green]✓[/green] Training complete!")
    console.print()

    console.print(Panel(
        create_stats_table(stats),
        title="[bold]Training Statistics[/bold]",
        border_style="yellow"
    ))

    console.print()
    console.print(Panel.fit("[bold]Most Frequent Contexts[/bold]", border_style="magenta"))

    for window, count in model.get_top_contexts(5):
        predictions = model.get_next_char_distribution(window, top_k=5)
        pred_str = ", ".join(f"'{_visible(c)}' ({p:.3f})" for c, p in predictions)
        console.print(f"  After '[bold]{escape(_visible(window))}[/bold]' ({count:,}x): "
                      f"{escape(pred_str)}", highlight=False)

    console.print()

    return model


def show_model(model: LanguageModel, limit: Optional[int] = None) -> None:
    """Print the debug representation of the model, one context per line."""
    # windows may contain newlines, so lines are built per context
    lines = [f"{window} : {table}" for window, table in model.contexts.items()]
    if limit is not None:
        lines = lines[:limit]

    console.print(Panel.fit("[bold]Model Contexts[/bold]", border_style="blue"))
    for line in lines:
        console.print(_visible(line), markup=False, highlight=False)

    hidden = len(model.contexts) - len(lines)
    if hidden > 0:
        console.print(f"[dim]... {hidden:,} more contexts[/dim]")
    console.print()


def show_generation(model: LanguageModel, initial_text: str, text_length: int) -> str:
    """Generate text and print it in a panel."""
    generated = model.generate(initial_text, text_length)
    console.print(Panel(Text(generated), title="[bold]Generated Text[/bold]",
                        border_style="green"))
    return generated


def interactive_demo(model: LanguageModel, text_length: int = 200):
    """Run an interactive demo of the model."""
    console.print()
    console.print(Panel.fit(
        "[bold magenta]Interactive Demo[/bold magenta]\n"
        "Enter some text to continue it.\n"
        "Type 'quit' to exit.",
        border_style="magenta"
    ))
    console.print()

    window_length = model.window_length

    while True:
        try:
            user_input = console.input("[bold cyan]Enter text:[/bold cyan] ")

            if user_input.lower() in ('quit', 'exit', 'q'):
                break

            if len(user_input) < window_length:
                console.print(f"[yellow]Need at least {window_length} characters.[/yellow]")
                continue

            window = user_input[-window_length:]
            predictions = model.get_next_char_distribution(window, top_k=10)

            console.print()
            console.print(f"[yellow]Window:[/yellow] '{escape(_visible(window))}'",
                          highlight=False)

            if not predictions:
                console.print("[red]Window never seen in training.[/red]")
                console.print()
                continue

            console.print("[yellow]Top predictions:[/yellow]")
            for i, (char, prob) in enumerate(predictions, 1):
                bar_length = int(prob * 50)
                bar = "█" * bar_length + "░" * (50 - bar_length)
                console.print(f"  {i:2}. {_visible(char):4} {bar} {prob:.4f}",
                              markup=False, highlight=False)

            console.print()
            show_generation(model, user_input, text_length)
            console.print()

        except (KeyboardInterrupt, EOFError):
            break

    console.print("\n[yellow]Goodbye![/yellow]")
