import logging
import tkinter as tk
import tkinter.font as tkfont

import ttkbootstrap as ttk
from ttkbootstrap import Style

from .animator import GroupAssignmentAnimator, monotonic_ms
from .audio import CueSequencer, SoundManager, ToneCueEmitter
from .config import (
    CANVAS_H,
    CANVAS_W,
    CIRCLE_RADIUS,
    CONTROL_W,
    CONTROLS_X,
    CONTROLS_Y,
    COUNT_PLACEHOLDER,
    DEFAULT_DURATION_MS,
    DEFAULT_GROUP_COUNT,
    FRAME_INTERVAL_MS,
    MAX_GROUPS,
    MAX_NAME_LINES,
    MIN_GROUPS,
    NAME_LINE_H,
    RING_CENTER,
    RING_RADIUS,
    ROSTER_PLACEHOLDER,
    THEME,
    TITLE,
)
from .layout import positions_for, visible_names
from .logging_config import setup_logging
from .rosters import Roster, default_rosters

logger = logging.getLogger(__name__)


# -------------------------
# Application
# -------------------------

class RandomGrouperApp:
    def __init__(self, root: tk.Tk, style: Style, rosters: list[Roster] | None = None):
        self.root = root
        self.style = style
        self.FONT_FAMILY = "Segoe UI"

        # State
        self.rosters = rosters if rosters is not None else default_rosters()
        self.group_count = DEFAULT_GROUP_COUNT

        self.clock = monotonic_ms
        self.sound = SoundManager()
        self.sequencer = CueSequencer(clock=self.clock)
        self.cues = ToneCueEmitter(self.sound, self.sequencer)
        self.animator = GroupAssignmentAnimator(self.cues, self.group_count, clock=self.clock)

        self.selected_roster = ttk.StringVar(value=ROSTER_PLACEHOLDER)
        self.selected_count = ttk.StringVar(value=COUNT_PLACEHOLDER)
        self.sound_enabled_var = tk.BooleanVar(value=True)
        self.sound.set_enabled(self.sound_enabled_var.get())

        self._dirty = True

        self._configure_root_window()
        self._build_main_screen()
        self._frame()

    # ---------- Typography helpers ----------

    def f(self, px: int, weight: str | None = None) -> tuple:
        if weight:
            return (self.FONT_FAMILY, px, weight)
        return (self.FONT_FAMILY, px)

    def _fit_font(self, text: str, max_px: int, start_px: int, min_px: int, weight: str = "normal") -> tuple:
        """Shrink the font until text fits inside max_px (or hits min_px)."""
        size = start_px
        test_font = tkfont.Font(family=self.FONT_FAMILY, size=size, weight=weight)
        while size > min_px and test_font.measure(text) > max_px:
            size -= 1
            test_font.configure(size=size)
        return (self.FONT_FAMILY, size, weight)

    # ---------- Window / Layout ----------

    def _configure_root_window(self):
        self.root.title(TITLE)
        screen_h = self.root.winfo_screenheight()
        window_h = min(CANVAS_H, max(600, screen_h - 80))
        self.root.geometry(f"{CANVAS_W}x{window_h}")

    def _colors(self) -> dict[str, str]:
        # theme-safe colors
        colors = getattr(self.style, "colors", None)
        return {
            "bg": getattr(colors, "dark", "#121212") if colors else "#121212",
            "fg": getattr(colors, "light", "#f8f9fa") if colors else "#f8f9fa",
            "muted": getattr(colors, "secondary", "#6c757d") if colors else "#6c757d",
            "circle": getattr(colors, "inputbg", "#1e1e1e") if colors else "#1e1e1e",
        }

    def _build_main_screen(self):
        palette = self._colors()

        self.canvas = tk.Canvas(
            self.root,
            width=CANVAS_W,
            height=CANVAS_H,
            bg=palette["bg"],
            highlightthickness=0,
            bd=0,
        )
        self.canvas.pack(fill="both", expand=True)

        self.canvas.create_text(
            CANVAS_W / 2, 40,
            text=TITLE,
            font=self.f(40, "bold"),
            fill=palette["fg"],
        )

        controls = ttk.Frame(self.canvas, padding=(0, 0))
        self.canvas.create_window(CONTROLS_X, CONTROLS_Y, anchor="nw", window=controls, width=CONTROL_W)

        roster_dropdown = ttk.Combobox(
            controls,
            textvariable=self.selected_roster,
            state="readonly",
            font=self.f(16),
            bootstyle="info",
            values=[r.label for r in self.rosters],
        )
        roster_dropdown.pack(fill="x", ipady=6)
        roster_dropdown.bind("<<ComboboxSelected>>", lambda e: self._on_roster_selected())

        count_dropdown = ttk.Combobox(
            controls,
            textvariable=self.selected_count,
            state="readonly",
            font=self.f(16),
            bootstyle="info",
            values=[str(n) for n in range(MIN_GROUPS, MAX_GROUPS + 1)],
        )
        count_dropdown.pack(fill="x", ipady=6, pady=(12, 0))
        count_dropdown.bind("<<ComboboxSelected>>", lambda e: self._on_count_selected())

        ttk.Button(
            controls,
            text="Make groups",
            bootstyle="success",
            command=self._start_grouping,
        ).pack(fill="x", ipady=10, pady=(12, 0))

        sound_row = ttk.Frame(controls)
        sound_row.pack(fill="x", pady=(10, 0))
        ttk.Label(sound_row, text="Sound", font=self.f(14), bootstyle="secondary").pack(side="left")
        ttk.Checkbutton(
            sound_row,
            text="",
            variable=self.sound_enabled_var,
            command=self._on_sound_toggle,
            bootstyle="success-round-toggle",
        ).pack(side="right")

        self.progress = ttk.Progressbar(controls, mode="determinate", maximum=100, bootstyle="success")
        self.progress.pack(fill="x", pady=(10, 0))

        self.roster_size_label = ttk.Label(controls, text="", font=self.f(14), bootstyle="secondary")
        self.roster_size_label.pack(anchor="w", pady=(6, 0))

        self.status_item = self.canvas.create_text(
            CANVAS_W - CONTROLS_X, CONTROLS_Y,
            text="Ready",
            anchor="e",
            font=self.f(18),
            fill=palette["muted"],
        )

    # ---------- Selection ----------

    def _selected_roster(self) -> Roster | None:
        label = (self.selected_roster.get() or "").strip()
        for roster in self.rosters:
            if roster.label == label:
                return roster
        return None

    def _on_roster_selected(self):
        roster = self._selected_roster()
        if roster is None:
            return
        self.roster_size_label.config(text=f"Names in roster: {len(roster.active_names())}")
        self._reset_groups()

    def _on_count_selected(self):
        try:
            count = int(self.selected_count.get())
        except ValueError:
            return
        self.group_count = count
        self._reset_groups()

    def _on_sound_toggle(self):
        self.sound.set_enabled(self.sound_enabled_var.get())

    # ---------- Grouping ----------

    def _reset_groups(self):
        self.sequencer.cancel_all()
        self.animator.reset(self.group_count)
        self._dirty = True

    def _start_grouping(self):
        roster = self._selected_roster()
        if roster is None:
            logger.info("Make groups pressed with no roster selected")
        names = list(roster.names) if roster else []
        self.sequencer.cancel_all()
        self.animator.start(names, self.group_count, DEFAULT_DURATION_MS)
        self._dirty = True

    # ---------- Frame loop ----------

    def _frame(self):
        now = self.clock()
        was_running = self.animator.is_running()
        if self.animator.advance(now) or was_running != self.animator.is_running():
            self._dirty = True
        self.sequencer.update(now)

        if self._dirty:
            self._draw()
            self._dirty = False

        self.root.after(FRAME_INTERVAL_MS, self._frame)

    def _draw(self):
        palette = self._colors()
        running = self.animator.is_running()
        self.canvas.itemconfig(self.status_item, text="Grouping..." if running else "Ready")
        self.progress["value"] = int(self.animator.reveal_progress() * 100)

        self.canvas.delete("groups")
        groups = self.animator.current_groups()
        cx, cy = RING_CENTER
        points = positions_for(len(groups), (cx, cy), RING_RADIUS)

        for i, (x, y) in enumerate(points):
            self.canvas.create_oval(
                x - CIRCLE_RADIUS, y - CIRCLE_RADIUS, x + CIRCLE_RADIUS, y + CIRCLE_RADIUS,
                outline=palette["muted"],
                width=2,
                fill=palette["circle"],
                tags="groups",
            )
            self.canvas.create_text(
                x, y - CIRCLE_RADIUS + 28,
                text=str(i + 1),
                font=self.f(30, "bold"),
                fill=palette["fg"],
                tags="groups",
            )
            self._draw_names_in_circle(x, y, groups[i], palette)

    def _draw_names_in_circle(self, x: float, y: float, names: list[str], palette: dict[str, str]):
        # most recent at the bottom
        shown, hidden = visible_names(names, MAX_NAME_LINES)
        start_y = y - CIRCLE_RADIUS + 54
        max_w = int(CIRCLE_RADIUS * 1.6)

        for i, name in enumerate(shown):
            self.canvas.create_text(
                x, start_y + i * NAME_LINE_H,
                text=name,
                anchor="n",
                font=self._fit_font(name, max_w, 12, 8),
                fill=palette["fg"],
                tags="groups",
            )

        if hidden:
            self.canvas.create_text(
                x, y + CIRCLE_RADIUS - 18,
                text=f"(+{hidden} more)",
                font=self.f(10),
                fill=palette["muted"],
                tags="groups",
            )


def main():
    setup_logging()
    style = Style(theme=THEME)
    root = style.master
    _ = RandomGrouperApp(root, style)
    root.mainloop()


if __name__ == "__main__":
    main()
