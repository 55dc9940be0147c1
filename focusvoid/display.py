"""Rich terminal formatting helpers."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from focusvoid.encouragement import EXIT_WARNING, format_time
from focusvoid.models import SessionSummary, TrackingMode
from focusvoid.session import SessionMachine

console = Console()

# Brightest grey used for fully visible text on the black void.
_MAX_GREY: int = 220


def fade_style(opacity: float, base: str = "") -> str:
    """Rich style for text shown at ``opacity`` against a black background."""
    level = int(round(_MAX_GREY * max(0.0, min(1.0, opacity))))
    colour = f"rgb({level},{level},{level})"
    return f"{base} {colour}".strip()


def progress_line(machine: SessionMachine) -> str:
    """``120 / 500 words`` or ``4:05 / 30:00``, with a tick once reached."""
    if machine.tracking_mode == TrackingMode.WORDS:
        text = f"{machine.word_count} / {machine.target} words"
    else:
        text = f"{format_time(machine.elapsed_seconds)} / {machine.target}:00"
    if machine.threshold_reached:
        text += " ✓"
    return text


def print_focus_header(machine: SessionMachine) -> None:
    """Print the commitment, progress and encouragement at their current fade."""
    if machine.exit_warning_visible:
        print_warning(EXIT_WARNING)

    if machine.title_opacity > 0:
        console.print(
            Text(f'"{machine.commitment}"', style=fade_style(machine.title_opacity, "italic")),
            justify="center",
        )

    opacity = machine.progress_opacity
    if opacity > 0:
        bar = ProgressBar(
            total=100,
            completed=machine.progress_percent,
            width=40,
            complete_style=fade_style(opacity),
            finished_style=fade_style(opacity, "green"),
        )
        table = Table.grid(padding=(0, 2))
        table.add_row(bar, Text(progress_line(machine), style=fade_style(opacity)))
        console.print(table, justify="center")
        console.print(
            Text(machine.encouragement, style=fade_style(opacity, "italic")),
            justify="center",
        )

    if machine.done_button_visible and machine.done_button_opacity > 0:
        label = "Type /done when you're done"
        if machine.hovering_done and machine.bonus_words > 0:
            label += f"  (+{machine.bonus_words} beyond your goal)"
        console.print(
            Text(label, style=fade_style(machine.done_button_opacity)), justify="right"
        )


def print_summary(summary: SessionSummary) -> None:
    """Print the completion panel."""
    if summary.tracking_mode == TrackingMode.WORDS:
        line = f"{summary.word_count} words written"
        if summary.bonus_words > 0:
            line += f" -- {summary.bonus_words} beyond your goal"
    else:
        line = f"{format_time(summary.elapsed_seconds)} focused"

    lines = [
        "[bold]You did it.[/bold]",
        "",
        line,
        f'Commitment: "{escape(summary.commitment)}"',
    ]
    console.print(Panel("\n".join(lines), title="Complete", border_style="green"))

    if summary.content:
        preview = summary.content
        if len(preview) > 500:
            preview = preview[:500] + "..."
        console.print(Panel(Text(preview), title="Your work", border_style="dim"))


def print_nudge(message: str) -> None:
    """Print an encouragement message in a styled panel."""
    text = Text(message, justify="center")
    console.print(Panel(text, border_style="magenta", padding=(1, 4)))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{message}[/yellow]")
