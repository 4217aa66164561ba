"""wavechord CLI entry point."""

import logging
import os
import re
import sys
from dataclasses import replace

import click
import numpy as np

from wavechord import __version__
from wavechord.analyzer import ChordAnalyzer
from wavechord.audio_processor import AudioProcessor, is_youtube_url
from wavechord.config import DEFAULT_CONFIG
from wavechord.exporters import MidiExporter, write_json
from wavechord.models import EmptyInputError
from wavechord.music_theory import format_chord_name, frequency_to_note, transpose_chord
from wavechord.pitch_tracker import NO_PITCH, PitchTracker

# Value an output option takes when given without a path
_DERIVED_NAME = "<derived>"


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _title_to_filename(title: str, suffix: str) -> str:
    """Convert a video title or file stem to a safe output filename.

    Strips characters that are invalid in filenames, collapses whitespace to
    underscores, and appends *suffix*.
    """
    sanitized = re.sub(r"[^\w\s-]", "", title)
    sanitized = re.sub(r"\s+", "_", sanitized.strip())
    return f"{sanitized or 'output'}{suffix}"


def _output_stem(processor: AudioProcessor, source: str) -> str:
    """Base name for derived outputs: the video title, or the file's stem."""
    if not is_youtube_url(source):
        return os.path.splitext(os.path.basename(source))[0]
    try:
        return processor.get_video_title(source)
    except Exception:
        return "output"


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="wavechord")
def main() -> None:
    """wavechord: chord, key and tempo detection from audio."""


# ── analyze subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("source")
@click.option(
    "--window",
    type=click.FloatRange(min=0.1),
    default=DEFAULT_CONFIG.window_seconds,
    show_default=True,
    metavar="SECS",
    help="Analysis window length.",
)
@click.option(
    "--hop",
    type=click.FloatRange(min=0.05),
    default=DEFAULT_CONFIG.hop_seconds,
    show_default=True,
    metavar="SECS",
    help="Distance between window starts.",
)
@click.option(
    "--threshold",
    type=click.FloatRange(0.0, 1.0),
    default=DEFAULT_CONFIG.confidence_threshold,
    show_default=True,
    help="Minimum template similarity for a window to count as a chord.",
)
@click.option(
    "--max-duration",
    type=click.FloatRange(min=1.0),
    default=None,
    metavar="SECS",
    help="Only analyse the first SECS seconds (bounds runtime on long tracks).",
)
@click.option(
    "--sr",
    "sample_rate",
    type=click.IntRange(min=8000),
    default=22050,
    show_default=True,
    help="Resample audio to this rate before analysis.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Threads used for per-window detection.",
)
@click.option(
    "--json",
    "json_path",
    is_flag=False,
    flag_value=_DERIVED_NAME,
    default=None,
    metavar="[PATH]",
    help="Write the result as JSON (name derived from the source if PATH is omitted).",
)
@click.option(
    "--midi",
    "midi_path",
    is_flag=False,
    flag_value=_DERIVED_NAME,
    default=None,
    metavar="[PATH]",
    help="Write the chords as MIDI (name derived from the source if PATH is omitted).",
)
@click.option("-v", "--verbose", count=True, help="Log progress (-v) or per-window detail (-vv).")
def analyze(
    source: str,
    window: float,
    hop: float,
    threshold: float,
    max_duration: float | None,
    sample_rate: int,
    workers: int,
    json_path: str | None,
    midi_path: str | None,
    verbose: int,
) -> None:
    """
    Detect the chords, key and tempo of an audio file or YouTube video.

    SOURCE is a local audio file or a YouTube URL (wrap in quotes if it contains &).

    \b
    Examples:
      wavechord analyze song.wav
      wavechord analyze song.mp3 --json song.json --midi song.mid
      wavechord analyze song.mp3 --json --midi
      wavechord analyze "https://youtu.be/dQw4w9WgXcQ" --window 1 --hop 0.5
    """
    _configure_logging(verbose)

    try:
        config = replace(
            DEFAULT_CONFIG,
            window_seconds=window,
            hop_seconds=hop,
            confidence_threshold=threshold,
            max_duration=max_duration,
        )
    except ValueError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)

    click.echo(f"wavechord v{__version__}")
    click.echo(f"  Source : {source}")
    click.echo(f"  Window : {window:g} s  |  Hop: {hop:g} s  |  Threshold: {threshold:g}")
    click.echo()

    with AudioProcessor(sample_rate=sample_rate) as processor:
        # ── Step 0: Resolve output filenames ────────────────────────────
        if json_path == _DERIVED_NAME or midi_path == _DERIVED_NAME:
            if is_youtube_url(source):
                click.echo("[0/3] Fetching video title...")
            stem = _output_stem(processor, source)
            if json_path == _DERIVED_NAME:
                json_path = _title_to_filename(stem, ".json")
            if midi_path == _DERIVED_NAME:
                midi_path = _title_to_filename(stem, ".mid")
            click.echo(f"      Output : {', '.join(p for p in (json_path, midi_path) if p)}")

        # ── Step 1: Decode ──────────────────────────────────────────────
        if is_youtube_url(source):
            click.echo("[1/3] Downloading audio from YouTube...")
        else:
            click.echo("[1/3] Decoding audio...")
        try:
            waveform = processor.process(source)
        except EmptyInputError as exc:
            click.echo(f"  ERROR: No audio to analyse: {exc}", err=True)
            sys.exit(1)
        except FileNotFoundError as exc:
            click.echo(f"  ERROR: {exc}", err=True)
            sys.exit(1)
        except Exception as exc:
            click.echo(f"  ERROR: Could not load audio: {exc}", err=True)
            sys.exit(1)

    click.echo(f"      {waveform.duration:.1f} s at {waveform.sample_rate} Hz")

    # ── Step 2: Analyse ─────────────────────────────────────────────────
    click.echo("[2/3] Analysing chord sequence...")
    result = ChordAnalyzer(config).analyze(waveform, workers=workers)

    click.echo(f"      Key   : {result.key}")
    click.echo(f"      Tempo : {result.tempo} BPM")
    if not result.chords:
        click.echo("  WARNING: No chords detected. Try lowering --threshold.", err=True)
    else:
        click.echo(f"      Detected {len(result.chords)} chord(s):")
        for segment in result.chords:
            bar = "=" * int(segment.duration * 4)
            click.echo(
                f"        {segment.time:7.2f}s  {format_chord_name(segment.name):<4}  "
                f"{segment.confidence:4.2f}  {bar}"
            )

    # ── Step 3: Export ──────────────────────────────────────────────────
    click.echo("[3/3] Writing output...")
    try:
        if json_path is not None:
            write_json(result, json_path)
            click.echo(f"      JSON → '{json_path}'")
        if midi_path is not None:
            MidiExporter.for_result(result).export(result.chords, midi_path)
            click.echo(f"      MIDI → '{midi_path}'")
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output: {exc}", err=True)
        sys.exit(1)

    click.echo()
    click.echo("Done!")


# ── pitch subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("audio_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--buffer-size",
    type=click.IntRange(min=64),
    default=2048,
    show_default=True,
    help="Samples per pitch-tracking buffer.",
)
@click.option(
    "--sr",
    "sample_rate",
    type=click.IntRange(min=8000),
    default=44100,
    show_default=True,
    help="Resample audio to this rate before tracking.",
)
def pitch(audio_file: str, buffer_size: int, sample_rate: int) -> None:
    """
    Track the pitch of a monophonic recording buffer by buffer.

    Simulates live input by feeding consecutive buffers of AUDIO_FILE to the
    pitch tracker and printing one line per buffer.
    """
    with AudioProcessor(sample_rate=sample_rate) as processor:
        try:
            waveform = processor.load_waveform(audio_file)
        except Exception as exc:
            click.echo(f"  ERROR: Could not load audio: {exc}", err=True)
            sys.exit(1)

    tracker = PitchTracker(waveform.sample_rate)
    n_buffers = waveform.n_samples // buffer_size
    for i in range(n_buffers):
        chunk = np.asarray(waveform.samples[i * buffer_size:(i + 1) * buffer_size])
        hz = tracker.update(chunk)
        time = i * buffer_size / waveform.sample_rate
        if hz == NO_PITCH:
            click.echo(f"{time:8.3f}s  -")
        else:
            click.echo(f"{time:8.3f}s  {hz:8.2f} Hz  {frequency_to_note(hz)}")


# ── transpose subcommand ───────────────────────────────────────────────────────

@main.command()
@click.argument("chords", nargs=-1, required=True)
@click.option(
    "--semitones",
    "-s",
    type=click.IntRange(-11, 11),
    required=True,
    help="Number of semitones to shift (negative = down).",
)
def transpose(chords: tuple[str, ...], semitones: int) -> None:
    """
    Transpose chord names, e.g. ``wavechord transpose C Am F G -s 2``.
    """
    try:
        shifted = [transpose_chord(chord, semitones) for chord in chords]
    except ValueError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    click.echo(" ".join(shifted))
