"""Windowed magnitude spectra for real-valued frames."""

import numpy as np


def hamming_window(n: int) -> np.ndarray:
    """
    Hamming window of length *n*: ``0.54 - 0.46 * cos(2*pi*i / (n - 1))``.

    A single-sample window is returned as ``[1.0]``.
    """
    if n == 1:
        return np.ones(1)
    i = np.arange(n)
    return 0.54 - 0.46 * np.cos(2 * np.pi * i / (n - 1))


def bin_frequencies(n: int, sample_rate: float) -> np.ndarray:
    """Centre frequency of each of the first ``n // 2`` FFT bins."""
    return np.arange(n // 2) * sample_rate / n


def magnitude_spectrum(frame: np.ndarray, sample_rate: float) -> np.ndarray:
    """
    Magnitude spectrum of one frame, non-negative frequencies only.

    The frame is Hamming-windowed before an FFT. Bin ``k`` of the result
    corresponds to ``k * sample_rate / N``.

    Args:
        frame:       1-D array of N real samples.
        sample_rate: Sample rate in Hz (kept for symmetry with
                     ``bin_frequencies``; magnitudes do not depend on it).

    Returns:
        Array of ``N // 2`` non-negative magnitudes. A silent frame yields
        all zeros.
    """
    frame = np.asarray(frame, dtype=np.float64)
    n = len(frame)
    if n == 0:
        return np.zeros(0)

    spectrum = np.fft.rfft(frame * hamming_window(n))
    return np.abs(spectrum[: n // 2])
