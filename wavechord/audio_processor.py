"""AudioProcessor: fetches and decodes audio into a Waveform for analysis."""

import logging
import os
import re
import shutil
import tempfile

import librosa
import yt_dlp

from wavechord.models import Waveform

logger = logging.getLogger(__name__)

_YOUTUBE_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"youtube\.com/watch\?.*v=([^&\n?#]+)"),
)


def extract_youtube_video_id(url: str) -> str | None:
    """Return the video ID of a YouTube URL, or None if it is not one."""
    for pattern in _YOUTUBE_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def is_youtube_url(source: str) -> bool:
    return extract_youtube_video_id(source) is not None


class AudioProcessor:
    """
    Turns audio sources into decoded mono Waveforms.

    Decoding is delegated to librosa (local files) and yt-dlp + ffmpeg
    (YouTube). The analysis core never touches files; this class is the
    boundary that does.

    Usage as a context manager ensures all temporary files are cleaned up:

        with AudioProcessor(sample_rate=22050) as processor:
            waveform = processor.process(source)
    """

    def __init__(self, sample_rate: int | None = 22050) -> None:
        """
        Args:
            sample_rate: Target rate to resample to; None keeps the file's rate.
        """
        self.sample_rate = sample_rate
        self._temp_dirs: list[str] = []

    def get_video_title(self, url: str) -> str:
        """
        Fetch the video title from YouTube without downloading any media.

        Returns:
            The video title string, or "youtube-<id>" if it cannot be determined.
        """
        fallback = f"youtube-{extract_youtube_video_id(url) or 'audio'}"
        ydl_opts = {"quiet": True, "no_warnings": True}
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(url, download=False)
            if isinstance(info, dict):
                return str(info.get("title", fallback))
            return fallback

    def download_audio(self, url: str) -> str:
        """
        Download audio from a YouTube URL and convert it to a WAV file.

        Returns:
            Absolute path to the downloaded WAV file.

        Raises:
            ValueError: If *url* is not a YouTube URL.
            FileNotFoundError: If the download succeeded but the WAV file is missing.
            yt_dlp.utils.DownloadError: If yt-dlp cannot retrieve the video.
        """
        video_id = extract_youtube_video_id(url)
        if video_id is None:
            raise ValueError(f"Invalid YouTube URL: '{url}'")

        temp_dir = tempfile.mkdtemp(prefix="wavechord_")
        self._temp_dirs.append(temp_dir)

        output_stem = os.path.join(temp_dir, video_id)
        wav_path = output_stem + ".wav"

        ydl_opts = {
            "format": "bestaudio/best",
            "outtmpl": output_stem + ".%(ext)s",
            "postprocessors": [
                {
                    "key": "FFmpegExtractAudio",
                    "preferredcodec": "wav",
                }
            ],
            "quiet": True,
            "no_warnings": True,
        }

        logger.info("Downloading YouTube video %s", video_id)
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            ydl.download([url])

        if not os.path.exists(wav_path):
            raise FileNotFoundError(
                f"Expected WAV file not found at '{wav_path}'. "
                "Ensure ffmpeg is installed and accessible in your PATH."
            )

        return wav_path

    def load_waveform(self, audio_path: str) -> Waveform:
        """
        Decode an audio file (any format librosa reads) into a mono Waveform.

        Raises:
            EmptyInputError: If the file decodes to zero samples.
        """
        y, sr = librosa.load(audio_path, sr=self.sample_rate, mono=True)
        logger.debug("Loaded %s: %d samples at %d Hz", audio_path, len(y), sr)
        return Waveform.from_samples(y, int(sr))

    def process(self, source: str) -> Waveform:
        """
        Resolve a file path or YouTube URL to a decoded Waveform.
        """
        if is_youtube_url(source):
            return self.load_waveform(self.download_audio(source))
        return self.load_waveform(source)

    def cleanup(self) -> None:
        """Remove all temporary directories created during processing."""
        for temp_dir in self._temp_dirs:
            shutil.rmtree(temp_dir, ignore_errors=True)
        self._temp_dirs.clear()

    def __enter__(self) -> "AudioProcessor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()
