import os
import sys


def resource_path(relative_path: str) -> str:
    """
    Works in dev (runs next to the package) and in PyInstaller --onefile (runs from _MEIPASS).
    """
    base_path = getattr(sys, "_MEIPASS", os.path.dirname(os.path.abspath(__file__)))
    return os.path.join(base_path, relative_path)


# -------------------------
# Window / Canvas
# -------------------------

THEME = "cosmo"
TITLE = "Random Grouper"

CANVAS_W = 1000
CANVAS_H = 1000

CONTROLS_X = 70
CONTROLS_Y = 90
CONTROL_W = 290

# Ring sits below the controls
RING_CENTER = (CANVAS_W / 2, 580)
RING_RADIUS = 300
CIRCLE_RADIUS = 115

# 10 o'clock in screen coordinates (y grows downward)
RING_START_ANGLE_DEG = -150.0

MAX_NAME_LINES = 9
NAME_LINE_H = 16

FRAME_INTERVAL_MS = 16


# -------------------------
# Grouping
# -------------------------

MIN_GROUPS = 2
MAX_GROUPS = 18
DEFAULT_GROUP_COUNT = 6

DEFAULT_DURATION_MS = 5000.0

ROSTER_PLACEHOLDER = "Choose a roster"
COUNT_PLACEHOLDER = "How many groups?"

ROSTERS_CSV = resource_path(os.path.join("assets", "rosters.csv"))

SAMPLE_ROSTER_SIZE = 32
SAMPLE_ROSTER_PREFIXES = ("A", "B", "C", "D", "E")


# -------------------------
# Sound
# -------------------------

SAMPLE_RATE = 22050
AMPLITUDE = 32767

# (attack s, decay s, peak level)
START_ENVELOPE = (0.005, 0.06, 0.35)
TICK_ENVELOPE = (0.002, 0.03, 0.25)
SUCCESS_ENVELOPE = (0.003, 0.08, 0.35)

START_SWEEP_FROM_HZ = 880.0
START_SWEEP_TO_HZ = 220.0
START_SWEEP_STEPS = 10
START_SWEEP_INTERVAL_MS = 25.0

TICK_SCALE_HZ = (523.25, 587.33, 659.25, 783.99, 880.0)  # C5 D5 E5 G5 A5

SUCCESS_NOTES_HZ = (523.25, 659.25, 783.99, 1046.5)  # C5 E5 G5 C6
SUCCESS_INTERVAL_MS = 140.0
