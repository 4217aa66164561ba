"""Fixtures built from the synthetic signals in signals.py."""

import wave

import numpy as np
import pytest
from signals import TEST_SR, triad


@pytest.fixture
def c_major_then_silence() -> np.ndarray:
    """3 s of a C4-E4-G4 chord followed by 3 s of digital silence."""
    return np.concatenate([triad("C", 3.0), np.zeros(3 * TEST_SR)])


@pytest.fixture
def c_am_f_loop() -> np.ndarray:
    """C, Am, F triads of 2 s each, looped 4 times (24 s)."""
    block = np.concatenate([triad("C", 2.0), triad("Am", 2.0), triad("F", 2.0)])
    return np.tile(block, 4)


@pytest.fixture
def noise() -> np.ndarray:
    """10 s of seeded white noise."""
    rng = np.random.default_rng(1234)
    return rng.uniform(-0.5, 0.5, 10 * TEST_SR)


@pytest.fixture
def wav_file(tmp_path, c_am_f_loop):
    """The C-Am-F loop written as a 16-bit PCM WAV file."""
    path = tmp_path / "loop.wav"
    pcm = np.clip(c_am_f_loop, -1.0, 1.0)
    pcm = (pcm * 32767).astype("<i2")
    with wave.open(str(path), "wb") as f:
        f.setnchannels(1)
        f.setsampwidth(2)
        f.setframerate(TEST_SR)
        f.writeframes(pcm.tobytes())
    return path
