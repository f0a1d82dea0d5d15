"""Detect flute notes from the microphone, show their spectrum and follow a tune in the terminal."""

__version__ = "0.1.0"