"""TempoEstimator: coarse BPM from the spacing of chord changes."""

from collections.abc import Iterable, Sequence

import numpy as np

from wavechord.models import ChordSegment

DEFAULT_BPM = 120
MIN_ONSETS = 3
OUTLIER_STDEVS = 2.0
MIN_BPM = 60
MAX_BPM = 200

#: Snap targets: every 5 BPM from 60 to 180, plus a few genre staples.
COMMON_BPMS: tuple[int, ...] = tuple(
    sorted(set(range(60, 181, 5)) | {72, 84, 96, 128, 174, 190, 200})
)


class TempoEstimator:
    """
    Estimates tempo from onset (chord start) times.

    Algorithm overview
    ------------------
    1. **Intervals** – Differences between consecutive onsets.

    2. **Outlier trimming** – Intervals further than two population standard
       deviations from the mean are dropped.

    3. **Median** – ``60 / median(interval)`` gives the raw BPM; the median
       resists whatever skew survives trimming.

    4. **Octave folding** – Below 60 BPM the value is doubled, above 200 it
       is halved, since chord changes usually land on a beat or a multiple
       of it.

    5. **Snapping** – The result is snapped to the nearest entry of
       ``COMMON_BPMS``.
    """

    def __init__(
        self,
        default_bpm: int = DEFAULT_BPM,
        common_bpms: Sequence[int] = COMMON_BPMS,
    ) -> None:
        self.default_bpm = default_bpm
        self.common_bpms = tuple(common_bpms)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _trim_outliers(intervals: np.ndarray) -> np.ndarray:
        mean = np.mean(intervals)
        spread = np.std(intervals)
        return intervals[np.abs(intervals - mean) <= OUTLIER_STDEVS * spread]

    @staticmethod
    def _fold_octave(bpm: float) -> float:
        if bpm < MIN_BPM:
            return bpm * 2
        if bpm > MAX_BPM:
            return bpm / 2
        return bpm

    def _snap(self, bpm: float) -> int:
        # min() keeps the first of equally close candidates
        return min(self.common_bpms, key=lambda candidate: abs(candidate - bpm))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def estimate(self, onset_times: Iterable[float]) -> int:
        """
        Estimate BPM from ordered onset times in seconds.

        Returns:
            A value from ``common_bpms``, or ``default_bpm`` when there are
            fewer than three onsets or no usable interval survives.
        """
        times = [float(t) for t in onset_times]
        if len(times) < MIN_ONSETS:
            return self.default_bpm

        intervals = np.diff(np.asarray(times))
        kept = self._trim_outliers(intervals)
        if kept.size == 0:
            return self.default_bpm

        median = float(np.median(kept))
        if median <= 0:
            return self.default_bpm

        return self._snap(self._fold_octave(60.0 / median))

    def from_segments(self, segments: Iterable[ChordSegment]) -> int:
        """Estimate BPM from the start times of chord segments."""
        return self.estimate(segment.time for segment in segments)


def estimate_tempo(onset_times: Iterable[float]) -> int:
    """Estimate BPM from onset times with the default snap table."""
    return TempoEstimator().estimate(onset_times)
