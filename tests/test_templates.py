"""Unit tests for the chord template bank and matcher."""

import numpy as np
import pytest

from wavechord.templates import CHORD_TEMPLATES, cosine_similarity, match_chord


def _chroma(*pitch_classes: int) -> np.ndarray:
    chroma = np.zeros(12)
    chroma[list(pitch_classes)] = 1.0
    return chroma


def test_bank_has_24_templates_in_canonical_order() -> None:
    names = [t.name for t in CHORD_TEMPLATES]
    assert len(names) == 24
    assert names[:3] == ["C", "C#", "D"]
    assert names[11] == "B"
    assert names[12] == "Cm"
    assert names[-1] == "Bm"


def test_templates_are_three_note_masks() -> None:
    for template in CHORD_TEMPLATES:
        assert template.mask.shape == (12,)
        assert template.mask.sum() == 3
        assert set(np.unique(template.mask).tolist()) == {0.0, 1.0}


def test_templates_are_read_only() -> None:
    with pytest.raises(ValueError):
        CHORD_TEMPLATES[0].mask[0] = 0.0


def test_cosine_similarity_zero_norm() -> None:
    assert cosine_similarity(np.zeros(12), _chroma(0, 4, 7)) == 0.0
    assert cosine_similarity(_chroma(0, 4, 7), np.zeros(12)) == 0.0


def test_cosine_similarity_bounds_for_non_negative_vectors() -> None:
    rng = np.random.default_rng(3)
    for _ in range(50):
        chroma = rng.uniform(0.0, 1.0, 12)
        for template in CHORD_TEMPLATES:
            assert 0.0 <= cosine_similarity(chroma, template.mask) <= 1.0 + 1e-12


def test_match_exact_major_triad() -> None:
    match = match_chord(_chroma(7, 11, 2))
    assert match.name == "G"
    assert match.confidence == pytest.approx(1.0)


def test_match_exact_minor_triad() -> None:
    match = match_chord(_chroma(9, 0, 4))
    assert match.name == "Am"
    assert match.confidence == pytest.approx(1.0)


def test_match_silence_has_zero_confidence() -> None:
    match = match_chord(np.zeros(12))
    assert match.confidence == 0.0
    assert match.name == "C"


def test_match_tie_resolves_to_first_template() -> None:
    # C-E-G-A scores the same against C major and A minor
    match = match_chord(_chroma(0, 4, 7, 9))
    assert match.name == "C"


def test_match_confidence_never_exceeds_one() -> None:
    match = match_chord(_chroma(0, 4, 7) * 5.0)
    assert match.confidence <= 1.0
