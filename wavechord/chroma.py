"""ChromaExtractor: folds windowed FFT magnitudes into 12 pitch classes."""

import numpy as np

from wavechord.config import DEFAULT_CONFIG, AnalysisConfig
from wavechord.music_theory import SEMITONES_PER_OCTAVE, frequency_to_pitch_class
from wavechord.spectral import bin_frequencies, magnitude_spectrum


def _band_pitch_classes(
    frame_size: int,
    sample_rate: float,
    fmin: float,
    fmax: float,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Select the FFT bins inside [fmin, fmax] and their pitch classes.

    Returns:
        (bin_indices, pitch_classes), two equal-length integer arrays.
    """
    freqs = bin_frequencies(frame_size, sample_rate)
    in_band = np.flatnonzero((freqs >= fmin) & (freqs <= fmax) & (freqs > 0))
    if in_band.size == 0:
        return in_band, in_band
    return in_band, frequency_to_pitch_class(freqs[in_band])


def extract_chroma(
    samples: np.ndarray,
    sample_rate: float,
    frame_size: int = 4096,
    fmin: float = 80.0,
    fmax: float = 2000.0,
    energy_floor: float = 1e-6,
) -> np.ndarray:
    """
    Compute a normalised 12-bin chroma vector for one analysis window.

    The window is cut into consecutive, non-overlapping sub-windows of
    *frame_size* samples. A window shorter than *frame_size* is treated as a
    single frame of its own length; otherwise a trailing partial sub-window is
    dropped. Each sub-window's magnitude spectrum is folded into pitch
    classes over the [fmin, fmax] band and accumulated across sub-windows.

    Args:
        samples:      1-D window of audio samples.
        sample_rate:  Sample rate in Hz.
        frame_size:   FFT size per sub-window.
        fmin, fmax:   Frequency band (Hz) contributing to the chroma.
        energy_floor: Maximum accumulated magnitude at or below which the
                      window counts as silent.

    Returns:
        Array of shape (12,) with max 1.0, or all zeros for a silent window.
    """
    samples = np.asarray(samples, dtype=np.float64)
    chroma = np.zeros(SEMITONES_PER_OCTAVE)
    if samples.size == 0:
        return chroma

    size = min(frame_size, samples.size)
    n_frames = samples.size // size
    bins, pitch_classes = _band_pitch_classes(size, sample_rate, fmin, fmax)
    if bins.size == 0:
        return chroma

    for i in range(n_frames):
        frame = samples[i * size:(i + 1) * size]
        magnitudes = magnitude_spectrum(frame, sample_rate)
        chroma += np.bincount(
            pitch_classes,
            weights=magnitudes[bins],
            minlength=SEMITONES_PER_OCTAVE,
        )

    peak = chroma.max()
    if peak <= energy_floor:
        return np.zeros(SEMITONES_PER_OCTAVE)
    return chroma / peak


class ChromaExtractor:
    """Applies ``extract_chroma`` with the band and frame size of a config."""

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def extract(self, samples: np.ndarray, sample_rate: float) -> np.ndarray:
        return extract_chroma(
            samples,
            sample_rate,
            frame_size=self.config.frame_size,
            fmin=self.config.fmin,
            fmax=self.config.fmax,
            energy_floor=self.config.energy_floor,
        )
