"""Tests for cue sequencing and tone rendering (no audio device needed)."""
from __future__ import annotations

import random
import sys
import types
from array import array

import pytest

from randomgrouper.audio import CueSequencer, SoundManager, ToneCueEmitter, render_tone, sweep
from randomgrouper.config import (
    START_ENVELOPE,
    SUCCESS_ENVELOPE,
    SUCCESS_NOTES_HZ,
    TICK_ENVELOPE,
    TICK_SCALE_HZ,
)


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingSound:
    def __init__(self) -> None:
        self.tones: list[tuple[float, tuple]] = []

    def play_tone(self, frequency_hz: float, envelope: tuple) -> None:
        self.tones.append((frequency_hz, envelope))


def make_emitter():
    clock = FakeClock(100.0)
    sound = RecordingSound()
    emitter = ToneCueEmitter(sound, CueSequencer(clock=clock), rng=random.Random(3))
    return emitter, sound, clock


def test_sequencer_fires_first_step_immediately_and_rest_on_update() -> None:
    clock = FakeClock(0.0)
    seq = CueSequencer(clock=clock)
    fired: list[int] = []

    seq.schedule([lambda k=k: fired.append(k) for k in range(4)], 50.0)

    assert fired == [0]
    assert seq.update(49.0) == 0
    assert seq.update(50.0) == 1
    assert seq.update(500.0) == 2
    assert fired == [0, 1, 2, 3]
    assert len(seq) == 0


def test_sequencer_interleaves_sequences_by_due_time() -> None:
    seq = CueSequencer(clock=FakeClock(0.0))
    fired: list[str] = []

    seq.schedule([lambda: fired.append("a0"), lambda: fired.append("a1")], 100.0, now=0.0)
    seq.schedule([lambda: fired.append("b0"), lambda: fired.append("b1")], 30.0, now=10.0)
    seq.update(1000.0)

    assert fired == ["a0", "b0", "b1", "a1"]


def test_cancel_all_drops_pending_steps() -> None:
    seq = CueSequencer(clock=FakeClock(0.0))
    fired: list[int] = []
    seq.schedule([lambda: fired.append(0), lambda: fired.append(1)], 10.0)

    seq.cancel_all()
    seq.update(100.0)

    assert fired == [0]


def test_start_cue_is_a_downward_sweep() -> None:
    emitter, sound, clock = make_emitter()

    emitter.play_start()
    assert len(sound.tones) == 1
    emitter.sequencer.update(clock.now + 25 * 9)

    freqs = [f for f, _ in sound.tones]
    assert freqs == pytest.approx(sweep(880.0, 220.0, 10))
    assert freqs[0] == pytest.approx(880.0)
    assert freqs[-1] == pytest.approx(220.0)
    assert all(env == START_ENVELOPE for _, env in sound.tones)


def test_tick_cue_is_one_blip_from_the_scale() -> None:
    emitter, sound, _ = make_emitter()

    for _ in range(20):
        emitter.play_tick()

    assert len(sound.tones) == 20
    assert all(f in TICK_SCALE_HZ and env == TICK_ENVELOPE for f, env in sound.tones)


def test_success_cue_is_an_arpeggio() -> None:
    emitter, sound, clock = make_emitter()

    emitter.play_success()
    emitter.sequencer.update(clock.now + 139)
    assert [f for f, _ in sound.tones] == [SUCCESS_NOTES_HZ[0]]

    emitter.sequencer.update(clock.now + 140 * 3)
    assert [f for f, _ in sound.tones] == list(SUCCESS_NOTES_HZ)
    assert all(env == SUCCESS_ENVELOPE for _, env in sound.tones)


def test_render_tone_length_and_range() -> None:
    pcm = render_tone(440.0, (0.01, 0.02, 0.5), sample_rate=1000)

    assert len(pcm) == 30
    assert pcm[0] == 0
    assert max(abs(s) for s in pcm) <= int(0.5 * 32767) + 1


def test_emitter_schedules_on_the_sequencer_it_was_given() -> None:
    clock = FakeClock(0.0)
    sequencer = CueSequencer(clock=clock)
    sound = RecordingSound()
    emitter = ToneCueEmitter(sound, sequencer)

    emitter.play_success()
    assert emitter.sequencer is sequencer
    sequencer.update(10_000.0)

    assert [f for f, _ in sound.tones] == list(SUCCESS_NOTES_HZ)


def test_cancel_on_shared_sequencer_silences_pending_notes() -> None:
    sequencer = CueSequencer(clock=FakeClock(0.0))
    sound = RecordingSound()
    ToneCueEmitter(sound, sequencer).play_start()

    sequencer.cancel_all()
    sequencer.update(10_000.0)

    assert len(sound.tones) == 1


# -------------------------
# SoundManager against a fake pygame
# -------------------------

class FakeSound:
    def __init__(self, buffer: bytes) -> None:
        self.buffer = buffer
        self.plays = 0

    def play(self) -> None:
        self.plays += 1


def fake_pygame(channels: int = 1) -> types.SimpleNamespace:
    state = {"init": None, "stopped": 0}

    def init(frequency, size, channels):
        state["init"] = (frequency, size, channels)

    def stop():
        state["stopped"] += 1

    mixer = types.SimpleNamespace(
        get_init=lambda: (22050, -16, channels),
        init=init,
        get_num_channels=lambda: 8,
        set_num_channels=lambda n: None,
        stop=stop,
        Sound=lambda buffer: FakeSound(buffer),
    )
    return types.SimpleNamespace(mixer=mixer, state=state)


def test_sound_manager_degrades_when_pygame_is_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "pygame", None)

    manager = SoundManager()
    manager.play_tone(440.0, TICK_ENVELOPE)
    manager.set_enabled(False)

    assert manager.available is False


def test_disabled_sound_manager_plays_nothing(monkeypatch: pytest.MonkeyPatch) -> None:
    pg = fake_pygame()
    monkeypatch.setitem(sys.modules, "pygame", pg)
    manager = SoundManager()

    manager.set_enabled(False)
    manager.play_tone(440.0, TICK_ENVELOPE)

    assert manager.available is True
    assert pg.state["stopped"] == 1
    assert manager._cache == {}


def test_same_tone_is_rendered_once(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "pygame", fake_pygame())
    manager = SoundManager()

    manager.play_tone(523.25, TICK_ENVELOPE)
    manager.play_tone(523.25, TICK_ENVELOPE)
    manager.play_tone(659.25, TICK_ENVELOPE)

    assert len(manager._cache) == 2
    assert manager._cache[(523.25, TICK_ENVELOPE)].plays == 2


def test_stereo_mixer_gets_interleaved_samples(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "pygame", fake_pygame(channels=2))
    manager = SoundManager()

    manager.play_tone(440.0, TICK_ENVELOPE)

    mono = render_tone(440.0, TICK_ENVELOPE, manager.sample_rate)
    stereo = array("h")
    stereo.frombytes(manager._cache[(440.0, TICK_ENVELOPE)].buffer)
    assert len(stereo) == 2 * len(mono)
    assert list(stereo[0::2]) == list(mono)
    assert list(stereo[1::2]) == list(mono)
