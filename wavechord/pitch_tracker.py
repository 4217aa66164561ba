"""
Monophonic pitch detection for live input.

Works on a single buffer at a time and keeps no history, so it can be called
from an audio callback. File analysis does not use it.
"""

import numpy as np

from wavechord.music_theory import frequency_to_note

#: Returned when a buffer is too quiet or has no clear period.
NO_PITCH = -1.0

RMS_THRESHOLD = 0.01
GOOD_CORRELATION = 0.9
MIN_CORRELATION = 0.01


def track_pitch(buffer: np.ndarray, sample_rate: int) -> float:
    """
    Estimate the fundamental frequency of one buffer by autocorrelation.

    Correlation at lag ``d`` is ``1 - sum|x[i] - x[i+d]| / N``. The search
    climbs while correlation stays above 0.9 and keeps rising; the first drop
    after such a peak ends it, and the peak lag is refined with a parabolic
    shift before converting to Hz.

    Args:
        buffer:      1-D float samples.
        sample_rate: Sample rate in Hz.

    Returns:
        Frequency in Hz, or ``NO_PITCH`` (-1.0) if nothing was detected.
    """
    buffer = np.asarray(buffer, dtype=np.float64)
    size = len(buffer)
    if size < 2 or sample_rate <= 0:
        return NO_PITCH

    rms = float(np.sqrt(np.mean(buffer ** 2)))
    if rms < RMS_THRESHOLD:
        return NO_PITCH

    max_lag = size // 2
    correlations = np.zeros(max_lag)
    best_offset = -1
    best_correlation = 0.0
    found_good = False
    last_correlation = 1.0

    for offset in range(max_lag):
        diff = np.abs(buffer[: size - offset] - buffer[offset:]).sum()
        correlation = 1.0 - diff / size
        correlations[offset] = correlation

        if correlation > GOOD_CORRELATION and correlation > last_correlation:
            found_good = True
            if correlation > best_correlation:
                best_correlation = correlation
                best_offset = offset
        elif found_good:
            # Past the first good peak: later peaks are only repeats of the period
            shift = (
                correlations[best_offset + 1] - correlations[best_offset - 1]
            ) / correlations[best_offset]
            return sample_rate / (best_offset + 8 * shift)
        last_correlation = correlation

    if best_correlation > MIN_CORRELATION and best_offset > 0:
        return sample_rate / best_offset
    return NO_PITCH


class PitchTracker:
    """
    Stateful wrapper around ``track_pitch`` for a live input stream.

    Usage:

        tracker = PitchTracker(sample_rate=44100)
        for chunk in stream:
            hz = tracker.update(chunk)
            print(tracker.note)
    """

    def __init__(self, sample_rate: int) -> None:
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self.sample_rate = sample_rate
        self.frequency = NO_PITCH

    def update(self, buffer: np.ndarray) -> float:
        """Analyse the next buffer and remember the estimate."""
        self.frequency = track_pitch(buffer, self.sample_rate)
        return self.frequency

    @property
    def note(self) -> str:
        """Nearest note name of the last estimate, e.g. "A4"; "" when unpitched."""
        return frequency_to_note(self.frequency)
