"""
Time-driven group assignment.

GroupAssignmentAnimator turns elapsed wall-clock time into a count of revealed
names. Each revealed name goes to bucket ``index % group_count`` and is paired
with one tick cue; a finished run plays one success cue. The host drives it by
calling ``advance(now)`` from its frame loop, at whatever rate it manages.
"""
import logging
import math
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, NamedTuple, Protocol, Sequence

from .config import DEFAULT_DURATION_MS, MAX_GROUPS, MIN_GROUPS
from .errors import EmptyRosterError, InvalidGroupCountError
from .shuffler import shuffle

logger = logging.getLogger(__name__)


class AudioCueEmitter(Protocol):
    """Fire-and-forget cue sink; none of these may block."""

    def play_start(self) -> None: ...

    def play_tick(self) -> None: ...

    def play_success(self) -> None: ...


class SilentCueEmitter:
    def play_start(self) -> None:
        pass

    def play_tick(self) -> None:
        pass

    def play_success(self) -> None:
        pass


class Reveal(NamedTuple):
    index: int
    name: str
    group: int


@dataclass
class AnimationState:
    running: bool = False
    start_time: float = 0.0
    duration: float = DEFAULT_DURATION_MS
    next_index: int = 0
    interval_duration: float = 0.0


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def check_group_count(group_count: int) -> int:
    if isinstance(group_count, bool) or not isinstance(group_count, int):
        raise InvalidGroupCountError(group_count, MIN_GROUPS, MAX_GROUPS)
    if not MIN_GROUPS <= group_count <= MAX_GROUPS:
        raise InvalidGroupCountError(group_count, MIN_GROUPS, MAX_GROUPS)
    return group_count


class GroupAssignmentAnimator:
    def __init__(
        self,
        cues: AudioCueEmitter | None = None,
        group_count: int = MIN_GROUPS,
        clock: Callable[[], float] = monotonic_ms,
        shuffler: Callable[[Sequence[str]], list[str]] = shuffle,
    ):
        self.cues = cues if cues is not None else SilentCueEmitter()
        self._clock = clock
        self._shuffle = shuffler
        self._lock = threading.RLock()

        self._state = AnimationState()
        self._order: tuple[str, ...] = ()
        self._group_count = check_group_count(group_count)
        self._groups: list[list[str]] = [[] for _ in range(self._group_count)]

    # ---------- Queries ----------

    @property
    def group_count(self) -> int:
        return self._group_count

    @property
    def state(self) -> AnimationState:
        with self._lock:
            return replace(self._state)

    def is_running(self) -> bool:
        with self._lock:
            return self._state.running

    def current_groups(self) -> list[list[str]]:
        with self._lock:
            return [list(bucket) for bucket in self._groups]

    def assignment_order(self) -> tuple[str, ...]:
        with self._lock:
            return self._order

    def reveal_progress(self) -> float:
        """Fraction of the current order already revealed (0.0 when nothing is armed)."""
        with self._lock:
            if not self._order:
                return 0.0
            return min(1.0, self._state.next_index / len(self._order))

    # ---------- Commands ----------

    def reset(self, group_count: int) -> None:
        """
        Empty all buckets and stop. Safe mid-run: the run is dropped without
        a success cue.
        """
        group_count = check_group_count(group_count)
        with self._lock:
            self._reset_locked(group_count)

    def start(
        self,
        roster: Sequence[str] | None,
        group_count: int,
        duration: float = DEFAULT_DURATION_MS,
    ) -> bool:
        """
        Arm a new run over the non-blank names of roster.

        Returns False (after one tick cue) when there is nothing to group;
        the animator is then left idle with empty buckets.
        """
        group_count = check_group_count(group_count)
        if duration <= 0:
            raise ValueError(f"Duration must be positive, got {duration}")

        with self._lock:
            self._reset_locked(group_count)
            try:
                names = self._filter_roster(roster)
            except EmptyRosterError as exc:
                logger.warning("Cannot start grouping: %s", exc)
                self.cues.play_tick()
                return False

            self._order = tuple(self._shuffle(names))
            self._state = AnimationState(
                running=True,
                start_time=self._clock(),
                duration=float(duration),
                next_index=0,
                interval_duration=duration / len(self._order),
            )
            logger.info(
                "Grouping %d names into %d groups over %.0f ms",
                len(self._order),
                group_count,
                duration,
            )
            self.cues.play_start()
            return True

    def advance(self, now: float) -> list[Reveal]:
        """
        Reveal every name that is due by ``now``.

        Repeating a call with the same ``now`` reveals nothing new. A late call
        catches up all pending names at once, still one tick cue per name.
        """
        with self._lock:
            st = self._state
            if not st.running:
                return []

            total = len(self._order)
            elapsed = now - st.start_time
            progress = max(0.0, min(1.0, elapsed / st.duration))
            target = math.floor(progress * total)

            revealed = []
            while st.next_index < target:
                idx = st.next_index
                name = self._order[idx]
                group = idx % self._group_count
                self._groups[group].append(name)
                self.cues.play_tick()
                st.next_index += 1
                revealed.append(Reveal(idx, name, group))

            if progress >= 1.0 and st.next_index >= total:
                st.running = False
                logger.info("Grouping finished: %s", [len(b) for b in self._groups])
                self.cues.play_success()

            return revealed

    # ---------- Internals ----------

    def _reset_locked(self, group_count: int) -> None:
        if self._state.running:
            logger.info(
                "Grouping aborted after %d of %d names",
                self._state.next_index,
                len(self._order),
            )
        self._group_count = group_count
        self._groups = [[] for _ in range(group_count)]
        self._order = ()
        self._state = AnimationState()

    @staticmethod
    def _filter_roster(roster: Sequence[str] | None) -> list[str]:
        names = [n for n in (roster or []) if str(n).strip()]
        if not names:
            raise EmptyRosterError("Roster has no names")
        return names
