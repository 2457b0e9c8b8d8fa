import csv
import logging
import os
from dataclasses import dataclass, field

from .config import ROSTERS_CSV, SAMPLE_ROSTER_PREFIXES, SAMPLE_ROSTER_SIZE
from .errors import RosterFileError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Roster:
    label: str
    names: tuple[str, ...] = field(default_factory=tuple)

    def active_names(self) -> list[str]:
        """Names that are not blank once trimmed, in roster order."""
        return [n for n in self.names if str(n).strip()]


# -------------------------
# Data loading
# -------------------------

def load_rosters(path: str) -> list[Roster]:
    """
    Accepts a CSV with 2 columns: roster_label, name.
    - If there is a header, it will be skipped automatically when detected.
    - Rosters keep the order in which their label first appears.
    - UTF-8 is assumed.
    """
    by_label: dict[str, list[str]] = {}
    if not os.path.isfile(path):
        raise RosterFileError(path)

    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        first = True
        for row in reader:
            if not row or len(row) < 2:
                continue
            if first:
                first = False
                header = ",".join(row).strip().lower()
                if ("roster" in header or "group" in header or "class" in header) and "name" in header:
                    continue
            label = row[0].strip()
            name = row[1].strip()
            if not label or not name:
                continue
            by_label.setdefault(label, []).append(name)

    # de-dup preserving order
    rosters = [Roster(label, tuple(dict.fromkeys(names))) for label, names in by_label.items()]
    logger.info("Loaded %d rosters from %s", len(rosters), path)
    return rosters


def make_roster(label: str, prefix: str, size: int = SAMPLE_ROSTER_SIZE) -> Roster:
    # A01..A32; replace with real names via the CSV
    return Roster(label, tuple(f"{prefix}{i:02d}" for i in range(1, size + 1)))


def sample_rosters() -> list[Roster]:
    return [make_roster(f"Group {p}", p) for p in SAMPLE_ROSTER_PREFIXES]


def default_rosters(path: str = ROSTERS_CSV) -> list[Roster]:
    """Rosters from the CSV next to the app, or the built-in samples when it is missing."""
    try:
        rosters = load_rosters(path)
    except RosterFileError as exc:
        logger.warning("%s; using sample rosters", exc)
        return sample_rosters()
    return rosters or sample_rosters()
