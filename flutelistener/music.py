"""Musical notes, note sequences and the practice tutor that walks through them."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Union

PLAYED = "played"
CURRENT = "current"
UPCOMING = "upcoming"


class MusicalNote(enum.Enum):
    """A note name without octave."""

    A = "A"
    A_SHARP = "A#"
    B = "B"
    B_SHARP = "B#"
    C = "C"
    C_SHARP = "C#"
    D = "D"
    D_SHARP = "D#"
    E = "E"
    E_SHARP = "E#"
    F = "F"
    F_SHARP = "F#"
    G = "G"
    G_SHARP = "G#"

    @classmethod
    def parse(cls, text: str) -> "MusicalNote":
        """Parse a note name such as ``"C#"``; raise ValueError otherwise."""
        for note in cls:
            if note.value == text:
                return note
        raise ValueError(f"couldn't parse {text!r} as a note")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Silence:
    """A pause that separates two phrases of a sequence."""

    def __str__(self) -> str:
        return ""


MusicalSound = Union[MusicalNote, Silence]


def _split_lines(content: str) -> List[str]:
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def parse_musical_sounds(content: str) -> List[MusicalSound]:
    """Parse comma separated notes, one phrase per line, with a silence between phrases."""
    sounds: List[MusicalSound] = []
    for number, line in enumerate(_split_lines(content)):
        phrase = [MusicalNote.parse(item) for item in line.split(",")]
        if number:
            sounds.append(Silence())
        sounds.extend(phrase)
    return sounds


def load_tutor(path) -> "Tutor":
    """Read a note file and return a fresh tutor for it."""
    content = Path(path).read_text(encoding="utf-8")
    return Tutor(parse_musical_sounds(content))


class Tutor:
    """Tracks progress through a sequence of notes to be played."""

    def __init__(self, notes_sequence) -> None:
        self.notes_sequence: List[MusicalSound] = list(notes_sequence)
        self.current_note_index = 0

    def advance(self, note: str) -> bool:
        """Move past the expected note if ``note`` names it; return whether it moved."""
        if self.is_complete():
            return False
        expected = self.notes_sequence[self.current_note_index]
        if not isinstance(expected, MusicalNote):
            return False
        try:
            heard = MusicalNote.parse(note)
        except ValueError:
            return False
        if heard != expected:
            return False
        next_index = self.current_note_index + 1
        while next_index < len(self.notes_sequence) and isinstance(
            self.notes_sequence[next_index], Silence
        ):
            next_index += 1
        self.current_note_index = next_index
        return True

    def is_complete(self) -> bool:
        """True once every note of the sequence has been played."""
        return self.current_note_index >= len(self.notes_sequence)

    def lines(self) -> List[List[Tuple[str, str]]]:
        """Group the sequence into phrases of ``(note, status)`` pairs."""
        result: List[List[Tuple[str, str]]] = []
        phrase: List[Tuple[str, str]] = []
        for index, sound in enumerate(self.notes_sequence):
            if isinstance(sound, Silence):
                result.append(phrase)
                phrase = []
                continue
            if index == self.current_note_index:
                status = CURRENT
            elif index > self.current_note_index:
                status = UPCOMING
            else:
                status = PLAYED
            phrase.append((str(sound), status))
        if phrase:
            result.append(phrase)
        return result