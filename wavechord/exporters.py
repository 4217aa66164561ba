"""Serialisation of analysis results: JSON for storage, MIDI for playback."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field

from midiutil import MIDIFile

from wavechord.models import AnalysisResult, ChordSegment
from wavechord.music_theory import SEMITONES_PER_OCTAVE, chord_pitch_classes, parse_chord

# ── JSON ────────────────────────────────────────────────────────────────────


def result_to_json(result: AnalysisResult, indent: int | None = 2) -> str:
    """Serialise a result as ``{"key", "tempo", "chords": [...]}`` JSON."""
    return json.dumps(result.to_dict(), indent=indent)


def write_json(result: AnalysisResult, output_path: str) -> None:
    """
    Write a result to *output_path* as UTF-8 JSON.

    Raises:
        OSError: If the file cannot be written.
    """
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(result_to_json(result))
        f.write("\n")


# ── MIDI ────────────────────────────────────────────────────────────────────

MIDDLE_C_OCTAVE = 4
BASS_OCTAVE = 3

# In midiutil Format 1 MIDI, track 0 is the conductor/tempo track.
TRACK_CONDUCTOR = 0
TRACK_CHORDS = 1
TRACK_BASS = 2

CHANNEL_CHORDS = 0
CHANNEL_BASS = 1


def pitch_class_to_midi(pitch_class: int, octave: int) -> int:
    """MIDI note for a pitch class in a scientific octave (C4 = 60)."""
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class


@dataclass
class VoicedSegment:
    """A chord segment with concrete MIDI notes for each hand."""

    segment: ChordSegment
    chord_notes: list[int] = field(default_factory=list)
    bass_notes: list[int] = field(default_factory=list)


def voice_segment(segment: ChordSegment) -> VoicedSegment:
    """
    Root-position voicing starting in the Middle C octave, root doubled in
    the bass one octave lower. C major -> C4 E4 G4 over C3.
    """
    root, _ = parse_chord(segment.name)
    root_midi = pitch_class_to_midi(root, MIDDLE_C_OCTAVE)
    chord_notes = [
        root_midi + (pc - root) % SEMITONES_PER_OCTAVE for pc in chord_pitch_classes(segment.name)
    ]
    return VoicedSegment(
        segment=segment,
        chord_notes=chord_notes,
        bass_notes=[pitch_class_to_midi(root, BASS_OCTAVE)],
    )


class MidiExporter:
    """
    Renders a chord timeline to a Format-1 MIDI file.

    Track 0 holds the tempo only, track 1 the triads (treble), track 2 the
    bass roots. Segment times in seconds are converted to beats with
    ``beats = seconds * tempo / 60``, so the file plays back in sync with the
    source audio at the detected tempo.
    """

    DEFAULT_VELOCITY = 80
    BASS_VELOCITY = 68

    def __init__(self, tempo: int = 120, velocity: int = DEFAULT_VELOCITY) -> None:
        self.tempo = tempo
        self.velocity = velocity

    def _seconds_to_beats(self, seconds: float) -> float:
        return seconds * (self.tempo / 60.0)

    def build(self, segments: Iterable[ChordSegment]) -> MIDIFile:
        midi = MIDIFile(numTracks=3, removeDuplicates=False, deinterleave=False)
        midi.addTempo(TRACK_CONDUCTOR, 0, self.tempo)
        midi.addTrackName(TRACK_CHORDS, 0, "Chords")
        midi.addTrackName(TRACK_BASS, 0, "Bass")

        for voiced in (voice_segment(segment) for segment in segments):
            start = self._seconds_to_beats(voiced.segment.time)
            length = self._seconds_to_beats(voiced.segment.duration)

            for pitch in voiced.bass_notes:
                midi.addNote(
                    track=TRACK_BASS,
                    channel=CHANNEL_BASS,
                    pitch=pitch,
                    time=start,
                    duration=length,
                    volume=self.BASS_VELOCITY,
                )
            for pitch in voiced.chord_notes:
                midi.addNote(
                    track=TRACK_CHORDS,
                    channel=CHANNEL_CHORDS,
                    pitch=pitch,
                    time=start,
                    duration=length,
                    volume=self.velocity,
                )
        return midi

    def export(self, segments: Iterable[ChordSegment], output_path: str) -> None:
        """
        Write segments to a Standard MIDI File.

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        midi = self.build(segments)
        with open(output_path, "wb") as f:
            midi.writeFile(f)

    @classmethod
    def for_result(cls, result: AnalysisResult) -> "MidiExporter":
        """Exporter running at the result's detected tempo."""
        return cls(tempo=result.tempo)
