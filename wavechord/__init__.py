"""Chord, key and tempo detection from decoded audio waveforms."""

from wavechord.analyzer import ChordAnalyzer, analyze_waveform
from wavechord.config import DEFAULT_CONFIG, AnalysisConfig
from wavechord.models import AnalysisResult, ChordSegment, EmptyInputError, Waveform
from wavechord.pitch_tracker import NO_PITCH, PitchTracker, track_pitch

__version__ = "0.1.0"
__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "ChordAnalyzer",
    "ChordSegment",
    "DEFAULT_CONFIG",
    "EmptyInputError",
    "NO_PITCH",
    "PitchTracker",
    "Waveform",
    "analyze_waveform",
    "track_pitch",
]
