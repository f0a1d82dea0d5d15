import pytest

from flutelistener.music import (
    CURRENT,
    PLAYED,
    UPCOMING,
    MusicalNote,
    Silence,
    Tutor,
    load_tutor,
    parse_musical_sounds,
)


@pytest.mark.parametrize("note", list(MusicalNote))
def test_parse_and_str_round_trip(note):
    assert MusicalNote.parse(str(note)) is note


def test_parse_sharp():
    assert MusicalNote.parse("A#") is MusicalNote.A_SHARP
    assert str(MusicalNote.G_SHARP) == "G#"


@pytest.mark.parametrize("text", ["H", "a", "", " C", "Cb"])
def test_parse_rejects_unknown(text):
    with pytest.raises(ValueError):
        MusicalNote.parse(text)


def test_parse_sounds_inserts_silence_between_lines():
    sounds = parse_musical_sounds("C,D\nE")
    assert sounds == [MusicalNote.C, MusicalNote.D, Silence(), MusicalNote.E]


def test_parse_sounds_trailing_newline_and_crlf():
    assert parse_musical_sounds("C\r\nD\r\n") == [MusicalNote.C, Silence(), MusicalNote.D]


def test_parse_sounds_empty_content():
    assert parse_musical_sounds("") == []


def test_parse_sounds_empty_line_is_error():
    with pytest.raises(ValueError):
        parse_musical_sounds("C\n\nD")


def test_parse_sounds_bad_note_is_error():
    with pytest.raises(ValueError):
        parse_musical_sounds("C,X")


def test_tutor_advances_and_skips_silence():
    tutor = Tutor(parse_musical_sounds("C,D\nE"))
    assert tutor.advance("C") is True
    assert tutor.current_note_index == 1
    assert tutor.advance("E") is False
    assert tutor.current_note_index == 1
    assert tutor.advance("D") is True
    assert tutor.current_note_index == 3
    assert not tutor.is_complete()
    assert tutor.advance("E") is True
    assert tutor.is_complete()
    assert tutor.advance("E") is False


def test_tutor_skips_several_silences():
    tutor = Tutor([MusicalNote.A, Silence(), Silence(), MusicalNote.B])
    tutor.advance("A")
    assert tutor.current_note_index == 3


def test_tutor_ignores_unparseable_note():
    tutor = Tutor([MusicalNote.A])
    assert tutor.advance("not a note") is False
    assert tutor.current_note_index == 0


def test_empty_tutor_is_complete():
    tutor = Tutor([])
    assert tutor.is_complete()
    assert tutor.lines() == []


def test_tutor_lines_statuses():
    tutor = Tutor(parse_musical_sounds("C,D\nE"))
    tutor.advance("C")
    assert tutor.lines() == [
        [("C", PLAYED), ("D", CURRENT)],
        [("E", UPCOMING)],
    ]


def test_load_tutor(tmp_path):
    path = tmp_path / "song.txt"
    path.write_text("G,A\nB\n", encoding="utf-8")
    tutor = load_tutor(path)
    assert tutor.notes_sequence == [MusicalNote.G, MusicalNote.A, Silence(), MusicalNote.B]
    assert tutor.current_note_index == 0


def test_load_tutor_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_tutor(tmp_path / "missing.txt")