"""
Chord template bank and cosine-similarity matcher.

Template ordering
-----------------
The bank is enumerated in a fixed order, which also decides ties:

    C, C#, D, D#, E, F, F#, G, G#, A, A#, B,          (12 major triads)
    Cm, C#m, Dm, D#m, Em, Fm, F#m, Gm, G#m, Am, A#m, Bm  (12 minor triads)

When two templates score the same, the one listed first wins.
"""

from dataclasses import dataclass

import numpy as np

from wavechord.music_theory import CHORD_PATTERNS, NOTE_NAMES, SEMITONES_PER_OCTAVE


@dataclass(frozen=True)
class ChordTemplate:
    """A read-only 12-entry 0/1 mask of the pitch classes in one chord."""

    name: str
    mask: np.ndarray


@dataclass(frozen=True)
class ChordMatch:
    """Best template for a chroma vector and its similarity in [0, 1]."""

    name: str
    confidence: float


def _build_template(root: int, chord_type: str) -> ChordTemplate:
    mask = np.zeros(SEMITONES_PER_OCTAVE)
    for interval in CHORD_PATTERNS[chord_type]:
        mask[(root + interval) % SEMITONES_PER_OCTAVE] = 1.0
    mask.flags.writeable = False

    suffix = "m" if chord_type == "minor" else ""
    return ChordTemplate(name=f"{NOTE_NAMES[root]}{suffix}", mask=mask)


def build_templates() -> tuple[ChordTemplate, ...]:
    """All 24 major/minor triad templates in canonical order."""
    majors = [_build_template(root, "major") for root in range(SEMITONES_PER_OCTAVE)]
    minors = [_build_template(root, "minor") for root in range(SEMITONES_PER_OCTAVE)]
    return tuple(majors + minors)


CHORD_TEMPLATES: tuple[ChordTemplate, ...] = build_templates()


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """``dot(a, b) / (|a| * |b|)``, or 0.0 when either vector has zero norm."""
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(a, b)) / (norm_a * norm_b)


def match_chord(
    chroma: np.ndarray,
    templates: tuple[ChordTemplate, ...] = CHORD_TEMPLATES,
) -> ChordMatch:
    """
    Find the template most similar to *chroma*.

    Args:
        chroma:    Length-12 non-negative chroma vector.
        templates: Template bank, searched in order.

    Returns:
        ChordMatch with the winning name and its confidence clamped to [0, 1].
        An all-zero chroma scores 0 against everything, so the first template
        is returned with confidence 0.
    """
    best_name = templates[0].name
    best_score = 0.0

    for template in templates:
        score = cosine_similarity(chroma, template.mask)
        if score > best_score:
            best_name, best_score = template.name, score

    return ChordMatch(name=best_name, confidence=min(max(best_score, 0.0), 1.0))
