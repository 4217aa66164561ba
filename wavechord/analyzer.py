"""ChordAnalyzer: waveform in, key / tempo / chord timeline out."""

import logging
from collections.abc import Callable, Sequence

import numpy as np

from wavechord.config import DEFAULT_CONFIG, AnalysisConfig
from wavechord.key_estimator import KeyEstimator
from wavechord.models import AnalysisResult, Waveform
from wavechord.segmenter import TemporalSegmenter
from wavechord.tempo_estimator import TempoEstimator

logger = logging.getLogger(__name__)


class ChordAnalyzer:
    """
    Runs the full analysis for one waveform.

    The segmenter produces the chord timeline; the key and tempo estimators
    then work independently from that timeline (names and start times
    respectively). No state is kept between calls, so one analyzer may be
    shared between threads.
    """

    def __init__(
        self,
        config: AnalysisConfig = DEFAULT_CONFIG,
        key_estimator: KeyEstimator | None = None,
        tempo_estimator: TempoEstimator | None = None,
    ) -> None:
        self.config = config
        self.segmenter = TemporalSegmenter(config)
        self.key_estimator = key_estimator or KeyEstimator()
        self.tempo_estimator = tempo_estimator or TempoEstimator()

    def analyze(
        self,
        waveform: Waveform,
        workers: int = 1,
        should_stop: Callable[[], bool] | None = None,
    ) -> AnalysisResult:
        """
        Analyse a decoded waveform.

        Args:
            waveform:    Mono signal (see ``Waveform.from_samples``).
            workers:     Threads used for per-window detection.
            should_stop: Optional cancellation poll, see
                         ``TemporalSegmenter.detect``.

        Returns:
            AnalysisResult with key, tempo and the merged chord segments.
        """
        logger.debug(
            "Analysing %.2f s at %d Hz (window %.2f s, hop %.2f s)",
            waveform.duration,
            waveform.sample_rate,
            self.config.window_seconds,
            self.config.hop_seconds,
        )
        segments = self.segmenter.segment(waveform, workers=workers, should_stop=should_stop)

        key = self.key_estimator.estimate(segment.name for segment in segments)
        tempo = self.tempo_estimator.from_segments(segments)
        logger.debug("Detected %d chord segment(s), key %s, %d BPM", len(segments), key, tempo)

        return AnalysisResult(key=key, tempo=tempo, chords=tuple(segments))


def analyze_waveform(
    samples: Sequence[float] | np.ndarray,
    sample_rate: int,
    config: AnalysisConfig | None = None,
    *,
    workers: int = 1,
    should_stop: Callable[[], bool] | None = None,
) -> AnalysisResult:
    """
    Infer chords, key and tempo from mono samples.

    Args:
        samples:     Mono float samples in [-1, 1].
        sample_rate: Sample rate in Hz.
        config:      Analysis parameters; defaults to ``DEFAULT_CONFIG``.
        workers:     Threads used for per-window detection.
        should_stop: Optional cancellation poll.

    Returns:
        AnalysisResult.

    Raises:
        EmptyInputError: If *samples* is empty or *sample_rate* <= 0.
        ValueError:      If *samples* is not one-dimensional.
    """
    waveform = Waveform.from_samples(samples, sample_rate)
    analyzer = ChordAnalyzer(config or DEFAULT_CONFIG)
    return analyzer.analyze(waveform, workers=workers, should_stop=should_stop)
