"""
Audio for the grouper: synthesized tones played through pygame.mixer.

The animator only knows the AudioCueEmitter capability set. ToneCueEmitter
turns those calls into tones; cues made of several notes are laid out on a
CueSequencer, which the frame loop pumps alongside the animator.
"""
import heapq
import itertools
import logging
import math
import random
from array import array
from typing import Callable, Sequence

from .animator import monotonic_ms
from .config import (
    AMPLITUDE,
    SAMPLE_RATE,
    START_ENVELOPE,
    START_SWEEP_FROM_HZ,
    START_SWEEP_INTERVAL_MS,
    START_SWEEP_STEPS,
    START_SWEEP_TO_HZ,
    SUCCESS_ENVELOPE,
    SUCCESS_INTERVAL_MS,
    SUCCESS_NOTES_HZ,
    TICK_ENVELOPE,
    TICK_SCALE_HZ,
)

logger = logging.getLogger(__name__)

Envelope = tuple[float, float, float]


# -------------------------
# Synthesis
# -------------------------

def render_tone(frequency_hz: float, envelope: Envelope, sample_rate: int = SAMPLE_RATE) -> array:
    """
    Signed 16-bit mono PCM for a triangle wave under an attack/decay envelope.
    The tone ends when the decay reaches zero (no sustain).
    """
    attack_s, decay_s, peak = envelope
    attack_n = max(1, int(sample_rate * attack_s))
    decay_n = max(1, int(sample_rate * decay_s))
    out = array("h")
    for idx in range(attack_n + decay_n):
        if idx < attack_n:
            level = peak * idx / attack_n
        else:
            level = peak * (1.0 - (idx - attack_n) / decay_n)
        phase = idx * frequency_hz / sample_rate
        tri = 2.0 * abs(2.0 * (phase - math.floor(phase + 0.5))) - 1.0
        out.append(int(max(-1.0, min(1.0, tri * level)) * AMPLITUDE))
    return out


def sweep(start_hz: float, end_hz: float, steps: int) -> list[float]:
    if steps <= 1:
        return [start_hz]
    return [start_hz + (end_hz - start_hz) * k / (steps - 1) for k in range(steps)]


# -------------------------
# Audio Manager (resilient)
# -------------------------

class SoundManager:
    """
    Uses pygame.mixer if available. A missing backend or mixer errors degrade to silence.
    - tones are rendered once per (frequency, envelope) and cached as mixer Sounds
    - self.enabled flag + set_enabled() to globally mute/unmute audio.
    """
    def __init__(self, sample_rate: int = SAMPLE_RATE):
        self._pygame = None
        self._mixer_ok = False
        self._channels = 1
        self.sample_rate = sample_rate
        self.enabled = True
        self._cache: dict[tuple[float, Envelope], object] = {}

        try:
            import pygame
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=sample_rate, size=-16, channels=1, buffer=512)
            freq, _, channels = pygame.mixer.get_init()
            self.sample_rate = int(freq)
            self._channels = int(channels)
            pygame.mixer.set_num_channels(max(16, pygame.mixer.get_num_channels()))
            self._pygame = pygame
            self._mixer_ok = True
        except Exception as exc:
            logger.debug("Audio disabled, mixer unavailable: %s", exc)
            self._pygame = None
            self._mixer_ok = False

    @property
    def available(self) -> bool:
        return self._mixer_ok

    def set_enabled(self, enabled: bool):
        """Enable/disable all audio. Disabling stops anything currently playing."""
        self.enabled = bool(enabled)
        if not self.enabled and self._mixer_ok:
            try:
                self._pygame.mixer.stop()
            except Exception as exc:
                logger.debug("Could not stop mixer: %s", exc)

    def play_tone(self, frequency_hz: float, envelope: Envelope):
        """Starts a tone on a free channel and returns immediately."""
        if not self.enabled or not self._mixer_ok:
            return
        try:
            self._sound_for(frequency_hz, envelope).play()
        except Exception as exc:
            logger.debug("Tone %.1f Hz failed: %s", frequency_hz, exc)

    def _sound_for(self, frequency_hz: float, envelope: Envelope):
        key = (round(frequency_hz, 2), envelope)
        snd = self._cache.get(key)
        if snd is None:
            pcm = render_tone(frequency_hz, envelope, self.sample_rate)
            if self._channels > 1:
                # interleave the mono samples across every output channel
                pcm = array("h", (s for s in pcm for _ in range(self._channels)))
            snd = self._pygame.mixer.Sound(buffer=pcm.tobytes())
            self._cache[key] = snd
        return snd


# -------------------------
# Cue sequencing
# -------------------------

class CueSequencer:
    """
    Plays N-step cue sequences at a fixed sub-interval, pumped by the frame loop.

    Step k of a sequence scheduled at time t is due at t + k * interval. The
    first step fires inside schedule(); later steps fire from update(now).
    A late update fires every overdue step, oldest first.
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self._clock = clock
        self._heap: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def schedule(self, steps: Sequence[Callable[[], None]], interval_ms: float, now: float | None = None):
        if now is None:
            now = self._clock()
        for k, step in enumerate(steps):
            heapq.heappush(self._heap, (now + k * interval_ms, next(self._seq), step))
        self.update(now)

    def update(self, now: float | None = None) -> int:
        if now is None:
            now = self._clock()
        fired = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, step = heapq.heappop(self._heap)
            step()
            fired += 1
        return fired

    def cancel_all(self):
        self._heap.clear()


class ToneCueEmitter:
    """Start whoosh, per-name tick and success chime, as synthesized tones."""

    def __init__(self, sound: SoundManager, sequencer: CueSequencer | None = None, rng: random.Random | None = None):
        self.sound = sound
        self.sequencer = sequencer if sequencer is not None else CueSequencer()
        self._rng = rng or random.Random()

    def _note(self, frequency_hz: float, envelope: Envelope) -> Callable[[], None]:
        return lambda: self.sound.play_tone(frequency_hz, envelope)

    def play_start(self) -> None:
        # quick downward sweep
        notes = sweep(START_SWEEP_FROM_HZ, START_SWEEP_TO_HZ, START_SWEEP_STEPS)
        self.sequencer.schedule([self._note(f, START_ENVELOPE) for f in notes], START_SWEEP_INTERVAL_MS)

    def play_tick(self) -> None:
        # small blip at a random pleasant pitch
        self.sound.play_tone(self._rng.choice(TICK_SCALE_HZ), TICK_ENVELOPE)

    def play_success(self) -> None:
        self.sequencer.schedule([self._note(f, SUCCESS_ENVELOPE) for f in SUCCESS_NOTES_HZ], SUCCESS_INTERVAL_MS)
