"""Data models shared by the analysis pipeline and its exporters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np


class EmptyInputError(ValueError):
    """Raised when a waveform has no samples or a non-positive sample rate."""


@dataclass(frozen=True)
class Waveform:
    """
    A decoded mono signal ready for analysis.

    Attributes:
        samples:     1-D float array, nominally in [-1, 1].
        sample_rate: Samples per second (Hz).
    """

    samples: np.ndarray
    sample_rate: int

    @classmethod
    def from_samples(cls, samples: Sequence[float] | np.ndarray, sample_rate: int) -> "Waveform":
        """
        Validate raw samples and wrap them in a read-only Waveform.

        Raises:
            EmptyInputError: If there are no samples or sample_rate <= 0.
            ValueError:      If the samples are not one-dimensional.
        """
        if sample_rate is None:
            raise EmptyInputError("sample_rate is required")
        # Fractional rates below 1 Hz truncate to zero
        rate = int(sample_rate)
        if rate <= 0:
            raise EmptyInputError(f"sample_rate must be at least 1 Hz, got {sample_rate}")

        array = np.asarray(samples, dtype=np.float64)
        if array.ndim != 1:
            raise ValueError(f"Expected mono samples (1-D), got shape {array.shape}")
        if array.size == 0:
            raise EmptyInputError("Waveform has no samples")

        array = array.copy()
        array.flags.writeable = False
        return cls(samples=array, sample_rate=rate)

    @property
    def n_samples(self) -> int:
        """Total number of samples."""
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Length of the signal in seconds."""
        return self.n_samples / self.sample_rate


@dataclass(frozen=True)
class ChordSegment:
    """
    A chord held over a contiguous stretch of the timeline.

    Attributes:
        name:       Chord label, e.g. "C" or "Am".
        time:       Start time in seconds.
        duration:   Length in seconds.
        confidence: Template similarity in [0, 1].
    """

    name: str
    time: float
    duration: float
    confidence: float

    @property
    def end(self) -> float:
        """End time in seconds."""
        return self.time + self.duration

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "time": round(self.time, 6),
            "duration": round(self.duration, 6),
            "confidence": round(self.confidence, 6),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Global key, tempo and the chord timeline of one waveform."""

    key: str
    tempo: int
    chords: tuple[ChordSegment, ...] = field(default_factory=tuple)

    @property
    def chord_names(self) -> list[str]:
        return [segment.name for segment in self.chords]

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "tempo": self.tempo,
            "chords": [segment.to_dict() for segment in self.chords],
        }
