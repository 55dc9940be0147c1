"""focusvoid CLI -- name your commitment, then write until it is done."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from focusvoid import display
from focusvoid.clock import MonotonicClock
from focusvoid.encouragement import EXIT_WARNING
from focusvoid.models import (
    MINUTE_TARGET_MAX,
    MINUTE_TARGET_MIN,
    WORD_TARGET_MAX,
    WORD_TARGET_MIN,
    Stage,
    TrackingMode,
)
from focusvoid.session import SessionMachine

app = typer.Typer(
    name="focusvoid",
    help="Name what matters most today, then write until it is done.",
    no_args_is_help=True,
)

DONE_COMMAND = "/done"
PEEK_COMMAND = "/peek"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Name what matters most today, then write until it is done."""
    _configure_logging(verbose)


class TerminalPresentation:
    """Clears the screen on entry. The terminal offers no clipboard."""

    def request_fullscreen(self) -> None:
        display.console.clear()

    def exit_fullscreen(self) -> None:
        pass

    def copy_text(self, text: str) -> None:
        raise NotImplementedError("no clipboard in terminal mode")


# ---------------------------------------------------------------------------
# Writing session
# ---------------------------------------------------------------------------


@app.command()
def write(
    commitment: str = typer.Argument(..., help="What matters most today?"),
    words: Optional[int] = typer.Option(
        None, "--words", "-w", help=f"Word target ({WORD_TARGET_MIN}-{WORD_TARGET_MAX})"
    ),
    minutes: Optional[int] = typer.Option(
        None, "--minutes", "-m", help=f"Time target ({MINUTE_TARGET_MIN}-{MINUTE_TARGET_MAX})"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write your text to this file when done"
    ),
) -> None:
    """Enter the void. Each line you type is added to your text."""
    from focusvoid import config as cfg

    if words is not None and minutes is not None:
        display.print_warning("Choose either --words or --minutes, not both.")
        raise typer.Exit(1)

    clock = MonotonicClock()
    machine = SessionMachine(clock, TerminalPresentation(), config=cfg.load_config())
    machine.set_commitment(commitment)

    if words is not None:
        machine.set_tracking_mode(TrackingMode.WORDS)
        if not machine.set_target(words):
            display.print_warning(
                f"Word target must be between {WORD_TARGET_MIN} and {WORD_TARGET_MAX}."
            )
            raise typer.Exit(1)
    elif minutes is not None:
        machine.set_tracking_mode(TrackingMode.TIME)
        if not machine.set_target(minutes):
            display.print_warning(
                f"Time target must be between {MINUTE_TARGET_MIN} and {MINUTE_TARGET_MAX} minutes."
            )
            raise typer.Exit(1)

    if not machine.begin():
        display.print_warning("Name your commitment first.")
        raise typer.Exit(1)

    display.print_nudge(
        "Once you begin, the void holds you until it's done.\n"
        f"Type {DONE_COMMAND} once you reach your goal, {PEEK_COMMAND} to look around."
    )
    _focus_loop(machine, clock)

    summary = machine.export()
    assert summary is not None
    display.print_summary(summary)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(summary.content, encoding="utf-8")
        display.print_success(f"Saved your work to {output}")


def _focus_loop(machine: SessionMachine, clock: MonotonicClock) -> None:
    """Read lines until the session is finished."""
    lines: list[str] = []
    while machine.stage == Stage.FOCUS:
        clock.poll()
        display.print_focus_header(machine)
        try:
            line = display.console.input("> ")
        except KeyboardInterrupt:
            clock.poll()
            machine.notify_interrupt_attempt()
            display.console.print()
            continue
        except EOFError:
            display.print_warning("Input closed. Session abandoned.")
            raise typer.Exit(1)
        clock.poll()

        command = line.strip()
        if command == DONE_COMMAND:
            if not machine.finish():
                display.print_warning(EXIT_WARNING)
            continue
        if command == PEEK_COMMAND:
            if machine.set_hovering_done(True):
                display.print_focus_header(machine)
                machine.set_hovering_done(False)
            else:
                display.print_info("Nothing to see yet. Keep writing.")
            continue

        lines.append(line)
        machine.set_content("\n".join(lines))


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@app.command()
def config(
    mode: Optional[str] = typer.Option(
        None, "--mode", help="Default tracking mode: words or time"
    ),
    words: Optional[int] = typer.Option(None, "--words", help="Default word target"),
    minutes: Optional[int] = typer.Option(None, "--minutes", help="Default time target"),
    reset: bool = typer.Option(False, "--reset", help="Reset to built-in defaults"),
    show: bool = typer.Option(False, "--show", help="Show current config"),
) -> None:
    """Configure the defaults new sessions start with."""
    from focusvoid import config as cfg

    if reset:
        cfg.reset_config()
        display.print_success("Reset to default targets.")
        return
    if show:
        current = cfg.load_config()
        display.print_info(f"Mode: {current.default_mode.value}")
        display.print_info(f"Word target: {current.default_target_words}")
        display.print_info(f"Time target: {current.default_target_minutes} min")
        return
    if mode is None and words is None and minutes is None:
        display.print_info("Use --mode, --words, --minutes, --reset, or --show.")
        return

    try:
        if mode is not None:
            try:
                tracking = TrackingMode(mode.lower())
            except ValueError:
                display.print_warning(f"Unknown mode '{mode}'. Use 'words' or 'time'.")
                raise typer.Exit(1)
            cfg.set_default_mode(tracking)
            display.print_success(f"New sessions will track {tracking.value}.")
        if words is not None:
            cfg.set_default_target(TrackingMode.WORDS, words)
            display.print_success(f"Default word target set to {words}.")
        if minutes is not None:
            cfg.set_default_target(TrackingMode.TIME, minutes)
            display.print_success(f"Default time target set to {minutes} min.")
    except ValidationError:
        display.print_warning(
            f"Targets must be {WORD_TARGET_MIN}-{WORD_TARGET_MAX} words "
            f"or {MINUTE_TARGET_MIN}-{MINUTE_TARGET_MAX} minutes."
        )
        raise typer.Exit(1)


# ---------------------------------------------------------------------------
# GUI
# ---------------------------------------------------------------------------


@app.command()
def gui() -> None:
    """Open the fullscreen writing window."""
    from focusvoid.gui import run_gui

    run_gui()
