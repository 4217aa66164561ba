"""
Analysis parameters for the sliding-window chord detector.

Configs are immutable so one instance can be shared by concurrent analyses.
Override single fields with ``dataclasses.replace``::

    from dataclasses import replace
    config = replace(DEFAULT_CONFIG, confidence_threshold=0.5)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Parameters for one analysis run.

    Attributes:
        window_seconds:       Length of each analysis window (W).
        hop_seconds:          Distance between window starts (H).
                              W=2.0 / H=1.0 gives 50% overlap.
        confidence_threshold: Windows scoring below this emit no chord (T).
        frame_size:           Samples per FFT sub-window inside a window.
        fmin:                 Lowest bin frequency folded into the chroma (Hz).
        fmax:                 Highest bin frequency folded into the chroma (Hz).
        energy_floor:         Accumulated chroma maxima at or below this are
                              treated as silence.
        max_duration:         Only the first ``max_duration`` seconds are
                              analysed. None analyses the whole waveform.
    """

    window_seconds: float = 2.0
    hop_seconds: float = 1.0
    confidence_threshold: float = 0.3
    frame_size: int = 4096
    fmin: float = 80.0
    fmax: float = 2000.0
    energy_floor: float = 1e-6
    max_duration: float | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive, got {self.window_seconds}")
        if self.hop_seconds <= 0:
            raise ValueError(f"hop_seconds must be positive, got {self.hop_seconds}")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError(
                f"confidence_threshold must be within [0, 1], got {self.confidence_threshold}"
            )
        if self.frame_size < 2:
            raise ValueError(f"frame_size must be at least 2, got {self.frame_size}")
        if self.fmin < 0 or self.fmax <= self.fmin:
            raise ValueError(
                f"Frequency band must satisfy 0 <= fmin < fmax, got [{self.fmin}, {self.fmax}]"
            )
        if self.energy_floor < 0:
            raise ValueError(f"energy_floor must be non-negative, got {self.energy_floor}")
        if self.max_duration is not None and self.max_duration <= 0:
            raise ValueError(f"max_duration must be positive, got {self.max_duration}")


DEFAULT_CONFIG = AnalysisConfig()
"""2 s windows, 1 s hop, 0.3 confidence threshold."""

FINE_CONFIG = AnalysisConfig(window_seconds=1.0, hop_seconds=0.5)
"""Shorter windows for songs with fast harmonic rhythm."""

LONG_TRACK_CONFIG = AnalysisConfig(max_duration=600.0)
"""Bounds the window loop to the first ten minutes."""
