"""KeyEstimator: scores the 24 major/minor keys against a chord sequence."""

import logging
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from wavechord.music_theory import NOTE_NAMES, SEMITONES_PER_OCTAVE, simplify_chord

logger = logging.getLogger(__name__)

DEFAULT_KEY = "C major"

# (semitones above the key root, "major" | "minor", weight)
# Tonic weighs most, then the dominant / subdominant family, then colour chords.
MAJOR_KEY_DEGREES: tuple[tuple[int, str, int], ...] = (
    (0, "major", 3),   # I
    (2, "minor", 1),   # ii
    (4, "minor", 1),   # iii
    (5, "major", 2),   # IV
    (7, "major", 2),   # V
    (9, "minor", 2),   # vi
)

MINOR_KEY_DEGREES: tuple[tuple[int, str, int], ...] = (
    (0, "minor", 3),   # i
    (3, "major", 1),   # III
    (5, "minor", 2),   # iv
    (7, "minor", 2),   # v
    (7, "major", 2),   # V (harmonic minor)
    (8, "major", 1),   # VI
    (10, "major", 1),  # VII
)


@dataclass(frozen=True)
class KeyProfile:
    """Diatonic chord weights for one key, e.g. "G major" -> {"G": 3, "D": 2, ...}."""

    name: str
    weights: Mapping[str, int]


def _build_profile(root: int, mode: str) -> KeyProfile:
    degrees = MAJOR_KEY_DEGREES if mode == "major" else MINOR_KEY_DEGREES
    weights: dict[str, int] = {}
    for offset, quality, weight in degrees:
        suffix = "m" if quality == "minor" else ""
        weights[NOTE_NAMES[(root + offset) % SEMITONES_PER_OCTAVE] + suffix] = weight
    return KeyProfile(name=f"{NOTE_NAMES[root]} {mode}", weights=MappingProxyType(weights))


def build_key_profiles() -> tuple[KeyProfile, ...]:
    """C major ... B major, then C minor ... B minor. Earlier keys win ties."""
    majors = [_build_profile(root, "major") for root in range(SEMITONES_PER_OCTAVE)]
    minors = [_build_profile(root, "minor") for root in range(SEMITONES_PER_OCTAVE)]
    return tuple(majors + minors)


KEY_PROFILES: tuple[KeyProfile, ...] = build_key_profiles()


class KeyEstimator:
    """Weighted diatonic-chord scoring over a fixed bank of key profiles."""

    def __init__(
        self,
        profiles: tuple[KeyProfile, ...] = KEY_PROFILES,
        default_key: str = DEFAULT_KEY,
    ) -> None:
        self.profiles = profiles
        self.default_key = default_key

    def _count(self, chord_names: Iterable[str]) -> Counter[str]:
        counts: Counter[str] = Counter()
        for name in chord_names:
            try:
                counts[simplify_chord(name)] += 1
            except ValueError:
                logger.debug("Skipping unparseable chord name %r", name)
        return counts

    @staticmethod
    def _score(profile: KeyProfile, counts: Counter[str]) -> int:
        # Chords outside the profile add nothing; there is no penalty
        return sum(count * profile.weights.get(chord, 0) for chord, count in counts.items())

    def scores(self, chord_names: Iterable[str]) -> dict[str, int]:
        """Score of every key, in profile order."""
        counts = self._count(chord_names)
        return {profile.name: self._score(profile, counts) for profile in self.profiles}

    def estimate(self, chord_names: Iterable[str]) -> str:
        """
        Most likely key for a chord sequence.

        Args:
            chord_names: Chord labels in timeline order, e.g. ["C", "Am", "F"].

        Returns:
            Key name such as "C major" or "A minor". An empty (or fully
            unparseable) sequence returns the default key.
        """
        counts = self._count(chord_names)
        if not counts:
            return self.default_key

        best_key = self.default_key
        best_score = None
        for profile in self.profiles:
            score = self._score(profile, counts)
            if best_score is None or score > best_score:
                best_key, best_score = profile.name, score
        return best_key


def estimate_key(chord_names: Iterable[str]) -> str:
    """Estimate the key of a chord-name sequence with the default profiles."""
    return KeyEstimator().estimate(chord_names)
