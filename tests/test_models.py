"""Unit tests for Waveform validation and configuration objects."""

from dataclasses import FrozenInstanceError, replace

import numpy as np
import pytest

from wavechord.config import DEFAULT_CONFIG, FINE_CONFIG, LONG_TRACK_CONFIG, AnalysisConfig
from wavechord.models import AnalysisResult, ChordSegment, EmptyInputError, Waveform


def test_waveform_duration() -> None:
    waveform = Waveform.from_samples(np.zeros(44100), 22050)
    assert waveform.n_samples == 44100
    assert waveform.duration == 2.0


def test_waveform_rejects_empty_samples() -> None:
    with pytest.raises(EmptyInputError):
        Waveform.from_samples([], 22050)


def test_waveform_rejects_bad_sample_rate() -> None:
    with pytest.raises(EmptyInputError):
        Waveform.from_samples([0.1], 0)


def test_waveform_samples_are_read_only_copies() -> None:
    source = np.zeros(10)
    waveform = Waveform.from_samples(source, 100)
    source[0] = 1.0
    assert waveform.samples[0] == 0.0
    with pytest.raises(ValueError):
        waveform.samples[0] = 1.0


def test_chord_segment_end_and_dict() -> None:
    segment = ChordSegment(name="G", time=1.5, duration=2.0, confidence=0.75)
    assert segment.end == 3.5
    assert segment.to_dict() == {"name": "G", "time": 1.5, "duration": 2.0, "confidence": 0.75}


def test_result_is_frozen() -> None:
    result = AnalysisResult(key="C major", tempo=120)
    assert result.chords == ()
    with pytest.raises(FrozenInstanceError):
        result.tempo = 90  # type: ignore[misc]


def test_default_config_values() -> None:
    assert DEFAULT_CONFIG.window_seconds == 2.0
    assert DEFAULT_CONFIG.hop_seconds == 1.0
    assert DEFAULT_CONFIG.confidence_threshold == 0.3
    assert DEFAULT_CONFIG.fmin == 80.0
    assert DEFAULT_CONFIG.fmax == 2000.0
    assert FINE_CONFIG.window_seconds == 1.0
    assert LONG_TRACK_CONFIG.max_duration == 600.0


@pytest.mark.parametrize(
    "overrides",
    [
        {"window_seconds": 0.0},
        {"hop_seconds": -1.0},
        {"confidence_threshold": 1.5},
        {"frame_size": 1},
        {"fmin": 2000.0, "fmax": 80.0},
        {"energy_floor": -1.0},
        {"max_duration": 0.0},
    ],
)
def test_invalid_config_raises(overrides) -> None:
    with pytest.raises(ValueError):
        replace(DEFAULT_CONFIG, **overrides)


def test_config_is_frozen() -> None:
    with pytest.raises(FrozenInstanceError):
        AnalysisConfig().hop_seconds = 0.5  # type: ignore[misc]


def test_waveform_rejects_fractional_rate_below_one_hertz() -> None:
    with pytest.raises(EmptyInputError):
        Waveform.from_samples([0.1, 0.2], 0.5)


def test_waveform_truncates_fractional_rate() -> None:
    assert Waveform.from_samples([0.1], 22050.7).sample_rate == 22050
