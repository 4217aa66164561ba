"""Pitch-class arithmetic and chord-name helpers."""

import math
import re

import numpy as np

# Chromatic pitch class names (index 0 = C)
NOTE_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

SEMITONES_PER_OCTAVE = 12
A4_FREQUENCY = 440.0
A4_MIDI = 69

# ── Interval tables ─────────────────────────────────────────────────────────

CHORD_PATTERNS: dict[str, tuple[int, ...]] = {
    "major": (0, 4, 7),
    "minor": (0, 3, 7),
    "dim": (0, 3, 6),
    "aug": (0, 4, 8),
    "maj7": (0, 4, 7, 11),
    "min7": (0, 3, 7, 10),
    "dom7": (0, 4, 7, 10),
}

_FLATS: dict[str, str] = {
    "Cb": "B",
    "Db": "C#",
    "Eb": "D#",
    "Fb": "E",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
}

_ROOT_RE = re.compile(r"^([A-G])([#b]?)")


def parse_chord(name: str) -> tuple[int, str]:
    """
    Split a chord name into its root pitch class and suffix.

    Args:
        name: Chord label such as "C", "F#m", "Bbmaj7".

    Returns:
        (root_pitch_class, suffix), e.g. ("Bbmaj7") -> (10, "maj7").

    Raises:
        ValueError: If the name does not start with a note letter.
    """
    match = _ROOT_RE.match(name.strip())
    if match is None:
        raise ValueError(f"Cannot parse chord name '{name}'")

    root = match.group(1) + match.group(2)
    root = _FLATS.get(root, root)
    if root not in NOTE_NAMES:
        # E# and B# are spelled as their enharmonic neighbours
        root = NOTE_NAMES[(NOTE_NAMES.index(match.group(1)) + 1) % SEMITONES_PER_OCTAVE]
    return NOTE_NAMES.index(root), name.strip()[match.end():]


def transpose_chord(name: str, semitones: int) -> str:
    """Shift a chord's root by *semitones*, keeping its suffix (sharps spelling)."""
    root, suffix = parse_chord(name)
    return NOTE_NAMES[(root + semitones) % SEMITONES_PER_OCTAVE] + suffix


def chord_type(name: str) -> str:
    """Classify a chord as major, minor, diminished, augmented or other."""
    _, suffix = parse_chord(name)
    suffix = suffix.lower()

    if "dim" in suffix:
        return "diminished"
    if "aug" in suffix:
        return "augmented"
    if "m" in suffix and "maj" not in suffix:
        return "minor"
    if not suffix or "maj" in suffix:
        return "major"
    return "other"


def simplify_chord(name: str) -> str:
    """
    Reduce any chord to its plain major or minor triad name.

    "Am7" -> "Am", "Cmaj7" -> "C", "Bb" -> "A#", "G7" -> "G".
    """
    root, suffix = parse_chord(name)
    suffix = suffix.lower()
    note = NOTE_NAMES[root]

    if "m" in suffix and "maj" not in suffix:
        if suffix == "m" or suffix.startswith("m7") or suffix.startswith("min"):
            return note + "m"
    return note


def is_complex_chord(name: str) -> bool:
    """True for anything beyond a plain major or minor triad."""
    _, suffix = parse_chord(name)
    return suffix not in ("", "m")


def format_chord_name(name: str) -> str:
    """Space out quality suffixes for display: "Cmaj7" -> "C maj7"."""
    formatted = name
    for quality in ("maj", "min", "dim", "aug", "dom"):
        formatted = formatted.replace(quality, f" {quality}")
    return formatted.strip()


def chord_pitch_classes(name: str) -> list[int]:
    """
    Pitch classes sounded by a chord, root first.

    Unknown suffixes fall back to the triad implied by ``chord_type``.
    """
    root, suffix = parse_chord(name)
    suffix_patterns = {
        "": "major",
        "m": "minor",
        "min": "minor",
        "dim": "dim",
        "aug": "aug",
        "maj7": "maj7",
        "m7": "min7",
        "min7": "min7",
        "7": "dom7",
    }
    pattern_name = suffix_patterns.get(suffix)
    if pattern_name is None:
        kind = chord_type(name)
        pattern_name = {"minor": "minor", "diminished": "dim", "augmented": "aug"}.get(kind, "major")
    return [(root + interval) % SEMITONES_PER_OCTAVE for interval in CHORD_PATTERNS[pattern_name]]


# ── Frequency mapping ───────────────────────────────────────────────────────

def frequency_to_pitch_class(frequency: float | np.ndarray) -> int | np.ndarray:
    """
    Map frequencies (Hz) to pitch classes, A4 = 440 Hz.

    ``round(12 * log2(f / 440) + 57) mod 12``. Accepts scalars or arrays of
    strictly positive frequencies.
    """
    ratio = np.asarray(frequency, dtype=np.float64) / A4_FREQUENCY
    semitones = np.rint(SEMITONES_PER_OCTAVE * np.log2(ratio) + 57)
    pitch_classes = np.mod(semitones, SEMITONES_PER_OCTAVE).astype(np.int64)
    if pitch_classes.ndim == 0:
        return int(pitch_classes)
    return pitch_classes


def frequency_to_midi(frequency: float) -> int:
    """Nearest MIDI note number for a frequency in Hz."""
    return int(round(A4_MIDI + SEMITONES_PER_OCTAVE * math.log2(frequency / A4_FREQUENCY)))


def frequency_to_note(frequency: float) -> str:
    """
    Name the note nearest to *frequency*, e.g. 440.0 -> "A4".

    Returns an empty string for non-positive frequencies (no pitch).
    """
    if frequency <= 0:
        return ""
    midi = frequency_to_midi(frequency)
    octave = midi // SEMITONES_PER_OCTAVE - 1
    return f"{NOTE_NAMES[midi % SEMITONES_PER_OCTAVE]}{octave}"
