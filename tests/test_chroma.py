"""Unit tests for chroma extraction."""

import numpy as np
import pytest
from signals import NOTE_HZ, TEST_SR, tones, triad

from wavechord.chroma import ChromaExtractor, _band_pitch_classes, extract_chroma
from wavechord.config import AnalysisConfig
from wavechord.spectral import bin_frequencies


def test_chroma_has_twelve_non_negative_bins() -> None:
    chroma = extract_chroma(triad("C", 2.0), TEST_SR)
    assert chroma.shape == (12,)
    assert np.all(chroma >= 0.0)


def test_chroma_max_is_one_for_tonal_window() -> None:
    chroma = extract_chroma(triad("Am", 2.0), TEST_SR)
    assert chroma.max() == pytest.approx(1.0)


def test_chroma_is_zero_for_silence() -> None:
    chroma = extract_chroma(np.zeros(2 * TEST_SR), TEST_SR)
    assert np.all(chroma == 0.0)


def test_chroma_single_tone_peaks_on_its_pitch_class() -> None:
    chroma = extract_chroma(tones([NOTE_HZ["A4"]], 2.0), TEST_SR)
    assert int(np.argmax(chroma)) == 9


def test_chroma_triad_tones_dominate() -> None:
    chroma = extract_chroma(triad("C", 2.0), TEST_SR)
    top_three = sorted(np.argsort(chroma)[-3:].tolist())
    assert top_three == [0, 4, 7]


def test_chroma_window_shorter_than_frame_is_analysed() -> None:
    chroma = extract_chroma(tones([NOTE_HZ["A4"]], 0.05), TEST_SR, frame_size=4096)
    assert int(np.argmax(chroma)) == 9


def test_band_selection_stays_within_limits() -> None:
    bins, pitch_classes = _band_pitch_classes(4096, TEST_SR, 80.0, 2000.0)
    freqs = bin_frequencies(4096, TEST_SR)[bins]
    assert freqs.min() >= 80.0
    assert freqs.max() <= 2000.0
    assert len(bins) == len(pitch_classes)
    assert set(pitch_classes.tolist()) == set(range(12))


def test_chroma_extractor_uses_config() -> None:
    config = AnalysisConfig(frame_size=2048)
    extractor = ChromaExtractor(config)
    chroma = extractor.extract(triad("F", 2.0), TEST_SR)
    assert chroma.max() == pytest.approx(1.0)
    assert sorted(np.argsort(chroma)[-3:].tolist()) == [0, 5, 9]
