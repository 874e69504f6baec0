# cliprecipe/app/infra/media/base.py
"""
Abstract interfaces for the media collaborators the pipeline drives.
Fakes implementing these let the extraction logic run without any
external process.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from cliprecipe.app.domain.models import TranscriptionResult


class AudioFetcher(ABC):
    @abstractmethod
    def fetch(self, source_link: str, work_dir: Path) -> Path:
        """
        Download the audio track of a video link into ``work_dir``.

        Returns:
            Path of the downloaded audio file

        Raises:
            AudioFetchError: If the link yields no audio track
        """
        pass


class FormatConverter(ABC):
    @abstractmethod
    def convert(self, audio_path: Path, timeout_seconds: Optional[float] = None) -> Path:
        """
        Convert an audio file to a mono 16kHz waveform next to it.

        Raises:
            AudioConversionError: If the input is unreadable or unsupported
            PipelineTimeoutError: If conversion runs past ``timeout_seconds``
        """
        pass


class Transcriber(ABC):
    @abstractmethod
    def transcribe(self, wav_path: Path, prefer_lang: Optional[str] = None) -> TranscriptionResult:
        """
        Transcribe a waveform file.

        Raises:
            TranscriptionServiceError: If the model is unavailable or fails
            NoSpeechDetectedError: If nothing was recognised
        """
        pass
