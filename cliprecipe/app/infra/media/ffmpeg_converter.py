from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from cliprecipe.app.domain.errors import AudioConversionError, PipelineTimeoutError
from cliprecipe.app.infra.media.base import FormatConverter

logger = logging.getLogger(__name__)

SAMPLE_RATE_HZ = 16000
CHANNELS = 1
STDERR_TAIL_CHARS = 500


def _wav_path_for(audio_path: Path) -> Path:
    return audio_path.with_name(f"{audio_path.stem}.{SAMPLE_RATE_HZ // 1000}k.wav")


class FfmpegConverter(FormatConverter):
    def __init__(self, binary: str = "ffmpeg"):
        self.binary = binary

    def build_command(self, audio_path: Path, wav_path: Path) -> list[str]:
        return [
            self.binary,
            "-nostdin",
            "-hide_banner",
            "-loglevel",
            "error",
            "-i",
            str(audio_path),
            "-ar",
            str(SAMPLE_RATE_HZ),
            "-ac",
            str(CHANNELS),
            "-y",
            str(wav_path),
        ]

    def convert(self, audio_path: Path, timeout_seconds: Optional[float] = None) -> Path:
        if not audio_path.exists():
            raise AudioConversionError(f"Audio file not found: {audio_path}")

        wav_path = _wav_path_for(audio_path)
        logger.info("Converting audio to WAV: %s -> %s", audio_path, wav_path)

        try:
            subprocess.run(
                self.build_command(audio_path, wav_path),
                capture_output=True,
                text=True,
                check=True,
                timeout=timeout_seconds,
            )
        except FileNotFoundError as error:
            raise AudioConversionError(f"{self.binary} not available: {error}") from error
        except subprocess.CalledProcessError as error:
            stderr = (error.stderr or "").strip()[-STDERR_TAIL_CHARS:]
            raise AudioConversionError(
                f"Failed to convert audio (exit {error.returncode}): {stderr}"
            ) from error
        except subprocess.TimeoutExpired as error:
            raise PipelineTimeoutError(timeout_seconds or 0) from error

        if not wav_path.exists():
            raise AudioConversionError("WAV file was not created")

        return wav_path
