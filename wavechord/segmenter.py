"""TemporalSegmenter: slides an analysis window over a waveform and merges chord runs."""

import logging
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import numpy as np

from wavechord.chroma import ChromaExtractor
from wavechord.config import DEFAULT_CONFIG, AnalysisConfig
from wavechord.models import ChordSegment, Waveform
from wavechord.templates import CHORD_TEMPLATES, ChordTemplate, match_chord

logger = logging.getLogger(__name__)

# Absorbs float error when the last window ends exactly at the waveform end
_TIME_EPSILON = 1e-9


def merge_segments(segments: list[ChordSegment]) -> list[ChordSegment]:
    """
    Collapse consecutive segments that carry the same chord name.

    The surviving segment stretches to the end of the absorbed one and keeps
    the higher confidence. Because analysis windows overlap, a segment that
    is followed by a different chord is clipped so it ends where the next one
    starts; start times are never moved. A segment that shares its start
    time with a different chord is clipped to nothing and dropped.

    Args:
        segments: Provisional segments ordered by start time.

    Returns:
        Time-ordered, non-overlapping segments with no two neighbours
        sharing a name.
    """
    if not segments:
        return []

    merged: list[ChordSegment] = []
    current = segments[0]

    for nxt in segments[1:]:
        if nxt.name != current.name:
            if current.end > nxt.time:
                current = replace(current, duration=nxt.time - current.time)
            # A segment clipped to nothing is dropped, which may expose an
            # earlier run of the incoming chord
            if current.duration > 0:
                merged.append(current)
            if merged and merged[-1].name == nxt.name:
                current = merged.pop()
            else:
                current = nxt
                continue

        current = replace(
            current,
            duration=nxt.time + nxt.duration - current.time,
            confidence=max(current.confidence, nxt.confidence),
        )

    # Flush the final run
    merged.append(current)
    return merged


class TemporalSegmenter:
    """
    Turns a waveform into a list of chord segments.

    Algorithm overview
    ------------------
    1. **Windowing** – Windows of W seconds start every H seconds, for as
       long as ``t + W`` stays within the waveform.

    2. **Detection** – Each window is reduced to a chroma vector and matched
       against the 24 triad templates.

    3. **Thresholding** – Windows whose best match scores below T emit
       nothing; the gap simply means "no confident chord here".

    4. **Merging** – Consecutive detections of the same chord are merged into
       one segment (see ``merge_segments``).

    Step 2 has no cross-window dependency and can run on a thread pool; the
    results are re-sorted by start time before the merge.
    """

    def __init__(
        self,
        config: AnalysisConfig = DEFAULT_CONFIG,
        templates: tuple[ChordTemplate, ...] = CHORD_TEMPLATES,
    ) -> None:
        """
        Args:
            config:    Window, hop, threshold and chroma parameters.
            templates: Chord template bank used for matching.
        """
        self.config = config
        self.templates = templates
        self._extractor = ChromaExtractor(config)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _analysed_duration(self, waveform: Waveform) -> float:
        duration = waveform.duration
        limit = self.config.max_duration
        if limit is not None and duration > limit:
            logger.warning(
                "Waveform is %.1f s long; analysing only the first %.1f s", duration, limit
            )
            return limit
        return duration

    def window_starts(self, duration: float) -> Iterator[float]:
        """Yield window start times ``0, H, 2H, ...`` while ``t + W <= duration``."""
        i = 0
        while True:
            start = i * self.config.hop_seconds
            if start + self.config.window_seconds > duration + _TIME_EPSILON:
                return
            yield start
            i += 1

    def _detect_window(self, waveform: Waveform, start: float) -> ChordSegment | None:
        """Match one window; None when its confidence is below threshold."""
        sr = waveform.sample_rate
        lo = int(round(start * sr))
        hi = min(int(round((start + self.config.window_seconds) * sr)), waveform.n_samples)

        chroma = self._extractor.extract(waveform.samples[lo:hi], sr)
        match = match_chord(chroma, self.templates)
        logger.debug("window %.2fs: %s (%.3f)", start, match.name, match.confidence)

        if match.confidence < self.config.confidence_threshold:
            return None
        return ChordSegment(
            name=match.name,
            time=start,
            duration=self.config.window_seconds,
            confidence=match.confidence,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def detect(
        self,
        waveform: Waveform,
        workers: int = 1,
        should_stop: Callable[[], bool] | None = None,
    ) -> list[ChordSegment]:
        """
        Per-window detections before merging, ordered by start time.

        Args:
            waveform:    Signal to analyse.
            workers:     Thread count for per-window detection (1 = inline).
            should_stop: Polled before each window; returning True ends the
                         loop early and keeps what was detected so far.
        """
        starts = list(self.window_starts(self._analysed_duration(waveform)))

        if workers > 1 and len(starts) > 1:

            def run(start: float) -> ChordSegment | None:
                if should_stop is not None and should_stop():
                    return None
                return self._detect_window(waveform, start)

            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(run, starts))
        else:
            results = []
            for start in starts:
                if should_stop is not None and should_stop():
                    logger.warning("Analysis cancelled at %.2f s", start)
                    break
                results.append(self._detect_window(waveform, start))

        provisional = sorted((seg for seg in results if seg is not None), key=lambda s: s.time)
        logger.debug("%d windows, %d confident detections", len(starts), len(provisional))
        return provisional

    def segment(
        self,
        waveform: Waveform,
        workers: int = 1,
        should_stop: Callable[[], bool] | None = None,
    ) -> list[ChordSegment]:
        """
        Detect and merge chord segments across the whole waveform.

        Returns:
            Time-ordered list of ChordSegment; empty for silence or when no
            window clears the confidence threshold.
        """
        provisional = self.detect(waveform, workers=workers, should_stop=should_stop)
        merged = merge_segments(provisional)
        logger.debug("merged %d detections into %d segments", len(provisional), len(merged))
        return merged


def segment_waveform(
    samples: np.ndarray,
    sample_rate: int,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> list[ChordSegment]:
    """Functional shortcut for ``TemporalSegmenter(config).segment(...)``."""
    return TemporalSegmenter(config).segment(Waveform.from_samples(samples, sample_rate))
