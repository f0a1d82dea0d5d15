import math
import queue
import threading

import numpy as np
import pytest

from flutelistener.audio import (
    NOTES,
    WINDOW_SIZE,
    AudioListener,
    FreqData,
    analyze_samples,
    get_note_from_frequency,
    note_from_midi_note_number,
)


def _sine(frequency, sample_rate, n, amplitude=1.0):
    t = np.arange(n) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


def test_a440_is_a():
    assert get_note_from_frequency(440.0) == "A"


def test_midi_69_is_a():
    assert note_from_midi_note_number(69) == "A"


@pytest.mark.parametrize("number", range(60, 84))
def test_midi_numbers_cycle_every_octave(number):
    assert note_from_midi_note_number(number) == note_from_midi_note_number(number + 12)


@pytest.mark.parametrize("step", range(-24, 25))
def test_semitone_steps_from_a440(step):
    freq = 440.0 * 2 ** (step / 12)
    assert get_note_from_frequency(freq) == NOTES[(9 + step) % 12]


@pytest.mark.parametrize("freq", [0.0, -10.0, math.nan, math.inf])
def test_no_note_for_degenerate_frequency(freq):
    assert get_note_from_frequency(freq) is None


def test_negative_midi_saturates_to_c():
    assert get_note_from_frequency(1e-3) == "C"


def test_empty_freq_data():
    data = FreqData.empty()
    assert data.data == []
    assert data.max_magnitude == 0.0
    assert data.samples_n == 0
    assert data.time_domain_samples == []


def test_analyze_pure_tone_peak():
    rate = WINDOW_SIZE
    samples = _sine(440, rate, WINDOW_SIZE)
    result = analyze_samples(samples, rate)
    assert result.peak_frequency == pytest.approx(440.0)
    assert get_note_from_frequency(result.peak_frequency) == "A"
    assert result.samples_n == WINDOW_SIZE
    assert result.sample_rate == rate
    assert result.max_magnitude == pytest.approx(max(m for _, m in result.data))


def test_analyze_data_is_limited_to_plotted_range():
    rate = WINDOW_SIZE
    result = analyze_samples(_sine(100, rate, WINDOW_SIZE), rate)
    freqs = [f for f, _ in result.data]
    assert freqs[0] == 0.0
    assert all(f <= 1500.0 for f in freqs)
    assert freqs == sorted(freqs)
    assert len(freqs) == 1501


def test_analyze_keeps_time_domain_samples():
    samples = [0.25, -0.5, 0.75, 0.0] * 8
    result = analyze_samples(samples, 8000)
    assert result.time_domain_samples == samples


def test_analyze_silence_has_zero_peak():
    result = analyze_samples([0.0] * 64, 8000)
    assert result.peak_frequency == 0.0
    assert result.max_magnitude == 0.0
    assert result.fundamental_frequency == 0.0


def test_analyze_empty_raises():
    with pytest.raises(ValueError):
        analyze_samples([], 44100)


def test_feed_emits_one_window_from_left_channel():
    out = queue.Queue()
    listener = AudioListener(out, threading.Event())
    left = [(i % 7) * 0.25 for i in range(WINDOW_SIZE)]
    interleaved = []
    for sample in left:
        interleaved.extend([sample, -1.0])
    listener.feed(interleaved[:-2], 2, 44100)
    assert out.empty()
    listener.feed(interleaved[-2:], 2, 44100)
    result = out.get_nowait()
    assert out.empty()
    assert result.samples_n == WINDOW_SIZE
    assert result.time_domain_samples == left


def test_feed_drops_incomplete_frame():
    out = queue.Queue()
    listener = AudioListener(out, threading.Event())
    listener.feed([0.5, 1.0, 0.25, 1.0, 0.75], 2, 8000)
    listener.feed([0.0] * (WINDOW_SIZE - 2), 1, 8000)
    result = out.get_nowait()
    assert result.time_domain_samples[:3] == [0.5, 0.25, 0.0]


def test_feed_large_block_emits_several_windows():
    out = queue.Queue()
    listener = AudioListener(out, threading.Event())
    listener.feed([0.0] * (WINDOW_SIZE * 3 + 5), 1, 8000)
    assert out.qsize() == 3


def test_feed_rejects_zero_channels():
    listener = AudioListener(queue.Queue(), threading.Event())
    with pytest.raises(ValueError):
        listener.feed([0.0], 0, 8000)