"""Tkinter presentation adapter -- the void itself.

The window only renders what ``SessionMachine`` exposes and forwards
keyboard, mouse and window-manager events to it. Timers run on the Tk
event loop through ``TkScheduler``.
"""

from __future__ import annotations

import logging
import tkinter as tk
from typing import Optional

from PIL import Image, ImageDraw, ImageFont, ImageTk

from focusvoid import config as cfg
from focusvoid.clock import TkScheduler
from focusvoid.display import progress_line
from focusvoid.encouragement import EXIT_WARNING, FULLSCREEN_HINT, format_time
from focusvoid.models import (
    MINUTE_TARGET_MAX,
    MINUTE_TARGET_MIN,
    WORD_TARGET_MAX,
    WORD_TARGET_MIN,
    Stage,
    TrackingMode,
)
from focusvoid.session import SessionMachine

log = logging.getLogger(__name__)

_VOID = "#000000"
_TEXT = "#d4d0cc"
_TITLE = "#e8e4e0"
_MUTED = "#6b6561"
_COMMITMENT = "#7a7670"
_PROGRESS = "#c4b5a0"
_REACHED = "#7a9a7a"
_WARNING = "#c49494"
_TROUGH = "#1a1a1a"

_SERIF = ("Georgia", 20)
_SANS = ("sans-serif", 11)


def blend(colour: str, opacity: float, background: str = _VOID) -> str:
    """Mix ``colour`` into ``background`` at ``opacity`` (Tk has no alpha)."""
    opacity = max(0.0, min(1.0, opacity))
    fg = [int(colour[i:i + 2], 16) for i in (1, 3, 5)]
    bg = [int(background[i:i + 2], 16) for i in (1, 3, 5)]
    mixed = [round(b + (f - b) * opacity) for f, b in zip(fg, bg)]
    return "#{:02x}{:02x}{:02x}".format(*mixed)


class TkPresentation:
    """Fullscreen and clipboard through the Tk root window."""

    def __init__(self, root: tk.Tk) -> None:
        self.root = root

    def request_fullscreen(self) -> None:
        self.root.attributes("-fullscreen", True)

    def exit_fullscreen(self) -> None:
        self.root.attributes("-fullscreen", False)

    def copy_text(self, text: str) -> None:
        self.root.clipboard_clear()
        self.root.clipboard_append(text)


class FocusVoidApp:
    """Main GUI application window."""

    RENDER_MS: int = 100

    def __init__(self) -> None:
        self.root = tk.Tk()
        self.root.title("focusvoid")
        self.root.geometry("900x700")
        self.root.configure(bg=_VOID)
        self._set_app_icon()

        self.machine = SessionMachine(
            TkScheduler(self.root),
            TkPresentation(self.root),
            config=cfg.load_config(),
        )
        self._was_fullscreen: bool = False
        self._frame: Optional[tk.Frame] = None

        self._build_setup()
        self._build_focus()
        self._build_complete()
        self._bind_events()
        self._sync_setup_widgets()
        self._render()

    # ------------------------------------------------------------------
    # App icon
    # ------------------------------------------------------------------

    def _set_app_icon(self) -> None:
        """Generate a 64x64 black icon with a soft ring and apply it."""
        size = 64
        img = Image.new("RGBA", (size, size), (0, 0, 0, 255))
        draw = ImageDraw.Draw(img)
        draw.ellipse([8, 8, size - 9, size - 9], outline=_REACHED, width=4)
        try:
            font = ImageFont.truetype("DejaVuSerif.ttf", 26)
        except OSError:
            font = ImageFont.load_default(size=26)
        bbox = draw.textbbox((0, 0), "V", font=font)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
        draw.text(((size - tw) // 2, (size - th) // 2 - bbox[1]), "V", fill=_TITLE, font=font)
        self._icon_image = ImageTk.PhotoImage(img)
        self.root.wm_iconphoto(True, self._icon_image)

    # ------------------------------------------------------------------
    # Setup stage
    # ------------------------------------------------------------------

    def _build_setup(self) -> None:
        self._setup_frame = tk.Frame(self.root, bg=_VOID)
        inner = tk.Frame(self._setup_frame, bg=_VOID)
        inner.place(relx=0.5, rely=0.5, anchor=tk.CENTER)

        tk.Label(
            inner, text="What matters most today?", bg=_VOID, fg=_TITLE, font=("Georgia", 26)
        ).pack(pady=(0, 8))
        tk.Label(
            inner,
            text="Name your commitment. Once you begin, the void holds you until it's done.",
            bg=_VOID,
            fg=_MUTED,
            font=_SANS,
        ).pack(pady=(0, 32))

        self._commitment_var = tk.StringVar()
        self._commitment_var.trace_add("write", self._on_commitment_changed)
        entry = tk.Entry(
            inner,
            textvariable=self._commitment_var,
            bg="#0a0a0a",
            fg=_TITLE,
            insertbackground=_TITLE,
            relief=tk.FLAT,
            justify=tk.CENTER,
            font=("Georgia", 16),
            width=40,
        )
        entry.pack(ipady=10, pady=(0, 28))
        entry.bind("<Return>", lambda _e: self._on_begin())
        entry.focus_set()

        tk.Label(inner, text="RELEASE THRESHOLD", bg=_VOID, fg="#4a4744", font=("sans-serif", 9)).pack()
        mode_frame = tk.Frame(inner, bg=_VOID)
        mode_frame.pack(pady=10)
        self._mode_var = tk.StringVar(value=TrackingMode.WORDS.value)
        for label, mode in (("Words", TrackingMode.WORDS), ("Time", TrackingMode.TIME)):
            tk.Radiobutton(
                mode_frame,
                text=label,
                value=mode.value,
                variable=self._mode_var,
                command=self._on_mode_changed,
                indicatoron=False,
                bg=_VOID,
                fg="#5a5754",
                selectcolor=_TROUGH,
                activebackground=_TROUGH,
                activeforeground=_TITLE,
                relief=tk.FLAT,
                padx=18,
                pady=6,
                font=_SANS,
            ).pack(side=tk.LEFT, padx=4)

        slider_frame = tk.Frame(inner, bg=_VOID)
        slider_frame.pack(pady=(4, 28))
        self._target_scale = tk.Scale(
            slider_frame,
            orient=tk.HORIZONTAL,
            length=220,
            showvalue=False,
            bg=_VOID,
            troughcolor=_TROUGH,
            highlightthickness=0,
            command=self._on_target_changed,
        )
        self._target_scale.pack(side=tk.LEFT, padx=(0, 16))
        self._target_label = tk.Label(slider_frame, bg=_VOID, fg=_TITLE, font=_SANS, width=12)
        self._target_label.pack(side=tk.LEFT)

        self._begin_button = tk.Button(
            inner,
            text="Enter the Void",
            command=self._on_begin,
            bg=_TITLE,
            fg="#0a0a0a",
            relief=tk.FLAT,
            padx=32,
            pady=12,
            font=("sans-serif", 12, "bold"),
        )
        self._begin_button.pack(pady=(0, 20))
        tk.Label(
            inner,
            text="Restart your machine to exit early. That's the only way out.",
            bg=_VOID,
            fg="#3a3734",
            font=("sans-serif", 9),
        ).pack()

    def _sync_setup_widgets(self) -> None:
        """Load commitment, mode and slider from the machine's fresh session."""
        machine = self.machine
        self._commitment_var.set(machine.commitment)
        self._mode_var.set(machine.tracking_mode.value)
        if machine.tracking_mode == TrackingMode.WORDS:
            self._target_scale.configure(
                from_=WORD_TARGET_MIN, to=WORD_TARGET_MAX, resolution=50
            )
        else:
            self._target_scale.configure(
                from_=MINUTE_TARGET_MIN, to=MINUTE_TARGET_MAX, resolution=5
            )
        self._target_scale.set(machine.target)

    def _on_commitment_changed(self, *_args: object) -> None:
        self.machine.set_commitment(self._commitment_var.get())
        self._render()

    def _on_mode_changed(self) -> None:
        self.machine.set_tracking_mode(self._mode_var.get())
        self._sync_setup_widgets()
        self._render()

    def _on_target_changed(self, value: str) -> None:
        self.machine.set_target(int(float(value)))
        self._render()

    def _on_begin(self) -> None:
        if self.machine.begin():
            self._text.delete("1.0", tk.END)
            self._text.edit_modified(False)
            self._text.focus_set()
        self._render()

    # ------------------------------------------------------------------
    # Focus stage
    # ------------------------------------------------------------------

    def _build_focus(self) -> None:
        self._focus_frame = tk.Frame(self.root, bg=_VOID)
        self._focus_frame.bind("<Double-Button-1>", self._on_double_click)

        self._warning_label = tk.Label(
            self._focus_frame, text=EXIT_WARNING, bg=_VOID, fg=_VOID, font=_SANS
        )
        self._warning_label.pack(pady=(24, 0))

        self._commitment_label = tk.Label(
            self._focus_frame, bg=_VOID, font=("Georgia", 16, "italic")
        )
        self._commitment_label.pack(pady=(16, 12))

        self._progress_canvas = tk.Canvas(
            self._focus_frame, width=400, height=3, bg=_VOID, highlightthickness=0
        )
        self._progress_canvas.pack()
        self._progress_label = tk.Label(self._focus_frame, bg=_VOID, font=("sans-serif", 10))
        self._progress_label.pack(pady=(8, 16))

        self._text = tk.Text(
            self._focus_frame,
            bg=_VOID,
            fg=_TEXT,
            insertbackground=_TEXT,
            relief=tk.FLAT,
            wrap=tk.WORD,
            font=_SERIF,
            spacing2=8,
            padx=32,
            pady=24,
            highlightthickness=2,
            highlightbackground=_VOID,
            highlightcolor=_VOID,
        )
        self._text.pack(fill=tk.BOTH, expand=True, padx=120)
        self._text.bind("<<Modified>>", self._on_text_modified)

        self._encouragement_label = tk.Label(
            self._focus_frame, bg=_VOID, font=("Georgia", 12, "italic")
        )
        self._encouragement_label.pack(pady=(16, 8))

        self._hint_label = tk.Label(
            self._focus_frame, text=FULLSCREEN_HINT, bg=_VOID, fg=_VOID, font=("sans-serif", 10)
        )
        self._hint_label.pack(pady=(0, 24))

        self._done_frame = tk.Frame(self._focus_frame, bg=_VOID)
        self._bonus_label = tk.Label(self._done_frame, bg=_VOID, fg="#6a8a6a", font=("sans-serif", 9))
        self._bonus_label.pack(anchor=tk.E)
        self._done_button = tk.Button(
            self._done_frame,
            text="I'm done",
            command=self._on_finish,
            bg=_VOID,
            activebackground=_VOID,
            relief=tk.FLAT,
            padx=20,
            pady=8,
            font=_SANS,
        )
        self._done_button.pack(anchor=tk.E, pady=(6, 0))
        for widget in (self._done_frame, self._done_button, self._bonus_label):
            widget.bind("<Enter>", lambda _e: self._on_hover(True))
            widget.bind("<Leave>", lambda _e: self._on_hover(False))

    def _on_text_modified(self, _event: tk.Event) -> None:  # type: ignore[type-arg]
        if not self._text.edit_modified():
            return
        self.machine.set_content(self._text.get("1.0", "end-1c"))
        self._text.edit_modified(False)
        self._text.see(tk.END)
        self._render()

    def _on_hover(self, hovering: bool) -> None:
        self.machine.set_hovering_done(hovering)
        self._render()

    def _on_double_click(self, _event: tk.Event) -> None:  # type: ignore[type-arg]
        self.machine.reacquire_presentation()
        self._render()

    def _on_finish(self) -> None:
        self.machine.finish()
        self._render()

    # ------------------------------------------------------------------
    # Complete stage
    # ------------------------------------------------------------------

    def _build_complete(self) -> None:
        self._complete_frame = tk.Frame(self.root, bg=_VOID)
        inner = tk.Frame(self._complete_frame, bg=_VOID)
        inner.place(relx=0.5, rely=0.5, anchor=tk.CENTER)

        tk.Label(inner, text="✓", bg=_VOID, fg="#7ac47a", font=("sans-serif", 36)).pack(pady=(0, 24))
        tk.Label(inner, text="You did it.", bg=_VOID, fg=_TITLE, font=("Georgia", 30)).pack()
        self._summary_label = tk.Label(inner, bg=_VOID, fg=_MUTED, font=_SANS)
        self._summary_label.pack(pady=(8, 28))
        self._preview_label = tk.Label(
            inner,
            bg="#080808",
            fg="#8a8680",
            font=("sans-serif", 10),
            wraplength=480,
            justify=tk.LEFT,
            padx=20,
            pady=16,
        )
        self._preview_label.pack(pady=(0, 12))
        self._copy_button = tk.Button(
            inner,
            command=self._on_copy,
            bg="#1a2a1a",
            fg="#7ac47a",
            relief=tk.FLAT,
            padx=24,
            pady=10,
            font=_SANS,
        )
        self._copy_button.pack(pady=(0, 28))
        tk.Button(
            inner,
            text="Start Another Session",
            command=self._on_new_session,
            bg=_VOID,
            fg="#6a6660",
            relief=tk.FLAT,
            padx=24,
            pady=10,
            font=_SANS,
        ).pack()

    def _on_copy(self) -> None:
        self.machine.copy_to_clipboard()
        self._render()

    def _on_new_session(self) -> None:
        if self.machine.new_session():
            self._sync_setup_widgets()
        self._render()

    # ------------------------------------------------------------------
    # Platform events
    # ------------------------------------------------------------------

    def _bind_events(self) -> None:
        for sequence in ("<Escape>", "<Control-w>", "<Control-q>", "<Command-w>", "<Command-q>"):
            try:
                self.root.bind_all(sequence, self._on_interrupt_key)
            except tk.TclError:
                log.debug("Key sequence %s not supported here", sequence)
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_interrupt_key(self, _event: tk.Event) -> Optional[str]:  # type: ignore[type-arg]
        if self.machine.notify_interrupt_attempt():
            self._render()
            return "break"
        return None

    def _on_close(self) -> None:
        if self.machine.notify_interrupt_attempt():
            self._render()
            return
        self.root.destroy()

    def _watch_fullscreen(self) -> None:
        """Report fullscreen changes made behind our back (window manager, F11)."""
        fullscreen = bool(self.root.attributes("-fullscreen"))
        if fullscreen != self._was_fullscreen:
            if fullscreen:
                self.machine.notify_presentation_regained()
            else:
                self.machine.notify_presentation_lost()
            self._was_fullscreen = fullscreen

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _show(self, frame: tk.Frame) -> None:
        if self._frame is frame:
            return
        if self._frame is not None:
            self._frame.pack_forget()
        frame.pack(fill=tk.BOTH, expand=True)
        self._frame = frame

    def _render(self) -> None:
        stage = self.machine.stage
        if stage == Stage.SETUP:
            self._show(self._setup_frame)
            self._render_setup()
        elif stage == Stage.FOCUS:
            self._show(self._focus_frame)
            self._render_focus()
        else:
            self._show(self._complete_frame)
            self._render_complete()

    def _tick_render(self) -> None:
        if self.machine.stage == Stage.FOCUS:
            self._watch_fullscreen()
        else:
            self._was_fullscreen = bool(self.root.attributes("-fullscreen"))
        self._render()
        self.root.after(self.RENDER_MS, self._tick_render)

    def _render_setup(self) -> None:
        machine = self.machine
        unit = "words" if machine.tracking_mode == TrackingMode.WORDS else "minutes"
        self._target_label.configure(text=f"{machine.target} {unit}")
        ready = bool(machine.commitment.strip())
        self._begin_button.configure(state=tk.NORMAL if ready else tk.DISABLED)

    def _render_focus(self) -> None:
        m = self.machine
        self._warning_label.configure(fg=_WARNING if m.exit_warning_visible else _VOID)
        self._hint_label.configure(fg="#4a4744" if m.fullscreen_hint_visible else _VOID)

        self._commitment_label.configure(
            text=f'"{m.commitment}"', fg=blend(_COMMITMENT, m.title_opacity)
        )

        opacity = m.progress_opacity
        canvas = self._progress_canvas
        canvas.delete("all")
        canvas.create_rectangle(0, 0, 400, 3, fill=blend(_TROUGH, opacity), width=0)
        fill = _REACHED if m.threshold_reached else _PROGRESS
        canvas.create_rectangle(
            0, 0, 4 * m.progress_percent, 3, fill=blend(fill, opacity), width=0
        )
        self._progress_label.configure(text=progress_line(m), fg=blend("#5a5754", opacity))
        self._encouragement_label.configure(
            text=m.encouragement, fg=blend("#3a3734", opacity)
        )

        glow = blend(_REACHED, 0.4 * m.glow_opacity)
        self._text.configure(highlightbackground=glow, highlightcolor=glow)

        if m.threshold_reached:
            self._done_frame.place(relx=1.0, rely=1.0, x=-40, y=-40, anchor=tk.SE)
            shown = m.done_button_visible
            self._done_button.configure(
                fg=blend("#6a7a6a", m.done_button_opacity if shown else 0.0),
                state=tk.NORMAL if shown else tk.DISABLED,
                disabledforeground=_VOID,
            )
            bonus = ""
            if m.hovering_done and m.bonus_words > 0:
                bonus = f"+{m.bonus_words} beyond your goal"
            self._bonus_label.configure(text=bonus)
        else:
            self._done_frame.place_forget()

    def _render_complete(self) -> None:
        summary = self.machine.export()
        if summary is None:
            return
        if summary.tracking_mode == TrackingMode.WORDS:
            text = f"{summary.word_count} words written"
            if summary.bonus_words > 0:
                text += f" -- {summary.bonus_words} beyond your goal"
        else:
            text = f"{format_time(summary.elapsed_seconds)} focused"
        self._summary_label.configure(text=text)

        content = summary.content
        if len(content) > 500:
            content = content[:500] + "..."
        self._preview_label.configure(text=content)
        self._copy_button.configure(
            text="Copied!" if self.machine.copied else "Copy Your Work"
        )

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Start the tkinter main loop."""
        self._tick_render()
        self.root.mainloop()


def run_gui() -> None:
    """Entry point for the GUI (called from CLI)."""
    app = FocusVoidApp()
    app.run()
