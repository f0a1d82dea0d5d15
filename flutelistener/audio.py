"""Microphone capture and spectral analysis of the captured signal."""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

NOTES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
WINDOW_SIZE = 4096
EPSILON = 1e-10
MAX_PLOTTED_FREQUENCY = 1500.0
HPS_FACTORS = (2, 3, 4)
_REQUESTED_RATE = 48000
_REQUESTED_CHANNELS = 2


@dataclass
class FreqData:
    """The spectrum of one block of samples and what was found in it."""

    data: List[Tuple[float, float]] = field(default_factory=list)
    peak_frequency: float = 0.0
    fundamental_frequency: float = 0.0
    max_magnitude: float = 0.0
    sample_rate: int = 0
    samples_n: int = 0
    time_domain_samples: List[float] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "FreqData":
        """Data for a block of nothing, used before anything was heard."""
        return cls()


def note_from_midi_note_number(midi_note_number: int) -> str:
    """Name of the note for a MIDI note number."""
    return NOTES[midi_note_number % 12]


def get_note_from_frequency(freq: float) -> Optional[str]:
    """Nearest note name for a frequency, or None when there is none."""
    if math.isnan(freq) or freq <= 0 or math.isinf(freq):
        return None
    value = 12.0 * math.log2(freq / 440.0) + 69.0
    if not math.isfinite(value):
        return None
    rounded = math.floor(abs(value) + 0.5) * (1 if value >= 0 else -1)
    return note_from_midi_note_number(max(rounded, 0))


def analyze_samples(samples, sample_rate: int) -> FreqData:
    """Run the FFT and harmonic product spectrum over one block of samples."""
    signal = np.asarray(samples, dtype=np.float64)
    n = int(signal.size)
    if n == 0:
        raise ValueError("cannot analyse an empty block of samples")
    magnitudes = np.abs(np.fft.fft(signal))
    max_k = n // 2 + 1

    spectra = [np.maximum(magnitudes[:max_k:step], EPSILON) for step in HPS_FACTORS]
    smallest = min(len(spectrum) for spectrum in spectra)
    product = 20.0 * np.log10(np.maximum(magnitudes[:smallest], EPSILON))
    for spectrum in spectra:
        product = product + spectrum[:smallest]
    best = int(np.argmax(product))

    if best != 0:
        yc = magnitudes[best]
        yl = magnitudes[best - 1]
        yr = magnitudes[best + 1]
        with np.errstate(divide="ignore", invalid="ignore"):
            offset = 0.5 * (yl - yr) / (yl - 2.0 * yc + yr)
        index = best + float(offset)
    else:
        index = 0.0
    fundamental = index * sample_rate / n

    bins = magnitudes[:max_k]
    frequencies = np.arange(max_k) * float(sample_rate) / n
    peak = int(np.argmax(bins))
    shown = frequencies <= MAX_PLOTTED_FREQUENCY
    data = list(zip(frequencies[shown].tolist(), bins[shown].tolist()))

    return FreqData(
        data=data,
        peak_frequency=float(frequencies[peak]),
        fundamental_frequency=float(fundamental),
        max_magnitude=float(bins[peak]),
        sample_rate=sample_rate,
        samples_n=n,
        time_domain_samples=signal.tolist(),
    )


class AudioListener:
    """Collects input samples into windows and publishes their analysis on a queue."""

    def __init__(self, freq_queue, stop_event) -> None:
        self.freq_queue = freq_queue
        self.stop_event = stop_event
        self._samples: List[float] = []
        self._lock = threading.Lock()

    def feed(self, data, channels: int, sample_rate: int) -> None:
        """Take interleaved frames, keep the first channel, analyse every full window."""
        if channels < 1:
            raise ValueError("channels must be at least 1")
        frames = np.asarray(data, dtype=np.float32).ravel()
        usable = frames.size - frames.size % channels
        left = frames[:usable:channels].tolist()
        with self._lock:
            while left:
                room = WINDOW_SIZE - len(self._samples)
                self._samples.extend(left[:room])
                left = left[room:]
                if len(self._samples) >= WINDOW_SIZE:
                    self.freq_queue.put(analyze_samples(self._samples, sample_rate))
                    self._samples = []

    def run(self) -> None:
        """Capture from the default input device until the stop event is set."""
        import pygame
        from pygame._sdl2 import audio as sdl_audio

        pygame.init()
        try:
            names = sdl_audio.get_audio_device_names(True)
            if not names:
                raise RuntimeError("No default input device found")
            settings = {"rate": _REQUESTED_RATE, "channels": _REQUESTED_CHANNELS}

            def on_audio(_device, memory) -> None:
                chunk = np.frombuffer(bytes(memory), dtype=np.float32)
                self.feed(chunk, settings["channels"], settings["rate"])

            device = sdl_audio.AudioDevice(
                devicename=names[0],
                iscapture=True,
                frequency=_REQUESTED_RATE,
                audioformat=sdl_audio.AUDIO_F32,
                numchannels=_REQUESTED_CHANNELS,
                chunksize=512,
                allowed_changes=sdl_audio.AUDIO_ALLOW_FREQUENCY_CHANGE
                | sdl_audio.AUDIO_ALLOW_CHANNELS_CHANGE,
                callback=on_audio,
            )
            settings["rate"] = int(getattr(device, "frequency", _REQUESTED_RATE))
            settings["channels"] = int(getattr(device, "numchannels", _REQUESTED_CHANNELS))
            try:
                device.pause(0)
                while not self.stop_event.wait(0.05):
                    pass
            finally:
                device.close()
        finally:
            pygame.quit()