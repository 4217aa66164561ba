"""Unit tests for JSON and MIDI export."""

import json

from wavechord.exporters import MidiExporter, result_to_json, voice_segment, write_json
from wavechord.models import AnalysisResult, ChordSegment


def _sample_result() -> AnalysisResult:
    return AnalysisResult(
        key="C major",
        tempo=90,
        chords=(
            ChordSegment(name="C", time=0.0, duration=2.0, confidence=0.91),
            ChordSegment(name="Am", time=2.0, duration=2.0, confidence=0.87),
            ChordSegment(name="F", time=4.0, duration=3.0, confidence=0.9),
        ),
    )


def test_result_to_json_fields() -> None:
    data = json.loads(result_to_json(_sample_result()))
    assert data["key"] == "C major"
    assert data["tempo"] == 90
    assert [c["name"] for c in data["chords"]] == ["C", "Am", "F"]
    assert data["chords"][1] == {"name": "Am", "time": 2.0, "duration": 2.0, "confidence": 0.87}


def test_write_json(tmp_path) -> None:
    out = tmp_path / "analysis.json"
    write_json(_sample_result(), str(out))
    assert json.loads(out.read_text(encoding="utf-8"))["key"] == "C major"


def test_voice_major_triad() -> None:
    voiced = voice_segment(ChordSegment(name="C", time=0.0, duration=1.0, confidence=1.0))
    assert voiced.chord_notes == [60, 64, 67]
    assert voiced.bass_notes == [48]


def test_voice_minor_triad_stays_in_root_position() -> None:
    voiced = voice_segment(ChordSegment(name="Am", time=0.0, duration=1.0, confidence=1.0))
    assert voiced.chord_notes == [69, 72, 76]
    assert voiced.bass_notes == [57]


def test_voice_seventh_chord() -> None:
    voiced = voice_segment(ChordSegment(name="G7", time=0.0, duration=1.0, confidence=1.0))
    assert voiced.chord_notes == [67, 71, 74, 77]


def test_midi_export_writes_standard_midi_file(tmp_path) -> None:
    out = tmp_path / "chords.mid"
    result = _sample_result()
    MidiExporter.for_result(result).export(result.chords, str(out))
    data = out.read_bytes()
    assert data.startswith(b"MThd")
    assert data.count(b"MTrk") >= 3


def test_midi_exporter_converts_seconds_to_beats() -> None:
    exporter = MidiExporter(tempo=120)
    assert exporter._seconds_to_beats(2.0) == 4.0
    assert MidiExporter.for_result(_sample_result()).tempo == 90
