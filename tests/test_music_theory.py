"""Unit tests for chord-name and frequency helpers."""

import numpy as np
import pytest

from wavechord.music_theory import (
    chord_pitch_classes,
    chord_type,
    format_chord_name,
    frequency_to_note,
    frequency_to_pitch_class,
    is_complex_chord,
    parse_chord,
    simplify_chord,
    transpose_chord,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("C", (0, "")),
        ("F#m", (6, "m")),
        ("Bbmaj7", (10, "maj7")),
        ("E#", (5, "")),
        ("Cb", (11, "")),
    ],
)
def test_parse_chord(name, expected) -> None:
    assert parse_chord(name) == expected


@pytest.mark.parametrize("name", ["", "H", "m7", "N/A"])
def test_parse_chord_rejects_invalid(name) -> None:
    with pytest.raises(ValueError):
        parse_chord(name)


@pytest.mark.parametrize(
    "name, semitones, expected",
    [
        ("C", 2, "D"),
        ("Am", 3, "Cm"),
        ("B", 1, "C"),
        ("Bb", 2, "C"),
        ("C#m7", -1, "Cm7"),
        ("G", -19, "C"),
    ],
)
def test_transpose_chord(name, semitones, expected) -> None:
    assert transpose_chord(name, semitones) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("C", "C"),
        ("Am", "Am"),
        ("Am7", "Am"),
        ("Cmin", "Cm"),
        ("Cmaj7", "C"),
        ("G7", "G"),
        ("Bb", "A#"),
        ("Ebm", "D#m"),
    ],
)
def test_simplify_chord(name, expected) -> None:
    assert simplify_chord(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("C", "major"),
        ("Cmaj7", "major"),
        ("Am", "minor"),
        ("Bdim", "diminished"),
        ("Caug", "augmented"),
        ("G7", "other"),
    ],
)
def test_chord_type(name, expected) -> None:
    assert chord_type(name) == expected


def test_is_complex_chord() -> None:
    assert not is_complex_chord("C")
    assert not is_complex_chord("Am")
    assert is_complex_chord("Am7")
    assert is_complex_chord("Csus4")


def test_format_chord_name() -> None:
    assert format_chord_name("Cmaj7") == "C maj7"
    assert format_chord_name("Bdim") == "B dim"
    assert format_chord_name("Am") == "Am"


def test_chord_pitch_classes() -> None:
    assert chord_pitch_classes("C") == [0, 4, 7]
    assert chord_pitch_classes("Am") == [9, 0, 4]
    assert chord_pitch_classes("G7") == [7, 11, 2, 5]
    assert chord_pitch_classes("Csus4") == [0, 4, 7]


def test_frequency_to_pitch_class_scalar() -> None:
    assert frequency_to_pitch_class(440.0) == 9
    assert frequency_to_pitch_class(261.63) == 0
    assert frequency_to_pitch_class(880.0) == 9
    assert frequency_to_pitch_class(110.0) == 9


def test_frequency_to_pitch_class_rounds_to_nearest_semitone() -> None:
    # 40 cents flat of C#4 still rounds to C#
    assert frequency_to_pitch_class(277.18 * 2 ** (-0.4 / 12)) == 1


def test_frequency_to_pitch_class_array() -> None:
    result = frequency_to_pitch_class(np.array([261.63, 329.63, 392.0]))
    assert result.tolist() == [0, 4, 7]


def test_frequency_to_note() -> None:
    assert frequency_to_note(440.0) == "A4"
    assert frequency_to_note(261.63) == "C4"
    assert frequency_to_note(27.5) == "A0"
    assert frequency_to_note(0.0) == ""
    assert frequency_to_note(-1.0) == ""
