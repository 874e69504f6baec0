from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yt_dlp

from cliprecipe.app.domain.errors import AudioFetchError
from cliprecipe.app.infra.media.base import AudioFetcher

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_FORMAT = "bestaudio[ext=m4a]/bestaudio"
OUTPUT_TEMPLATE = "audio.%(ext)s"


def _create_ydl_options(work_dir: Path, audio_format: str) -> dict:
    return {
        "quiet": True,
        "noprogress": True,
        "noplaylist": True,
        "check_formats": False,
        "format": audio_format,
        "outtmpl": str(work_dir / OUTPUT_TEMPLATE),
    }


def _extract_audio_filepath(info: Optional[dict]) -> Optional[str]:
    if not isinstance(info, dict):
        return None
    requested = info.get("requested_downloads")
    if requested:
        first = requested[0]
        return first.get("filepath") or first.get("filename")
    return info.get("filepath") or info.get("_filename")


class YtDlpAudioFetcher(AudioFetcher):
    def __init__(self, audio_format: str = DEFAULT_AUDIO_FORMAT):
        self.audio_format = audio_format

    def fetch(self, source_link: str, work_dir: Path) -> Path:
        work_dir.mkdir(parents=True, exist_ok=True)
        opts = _create_ydl_options(work_dir, self.audio_format)

        logger.info("Downloading audio from: %s", source_link)
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                info = ydl.extract_info(source_link, download=True)
        except yt_dlp.utils.DownloadError as error:
            raise AudioFetchError(f"Failed to download audio: {error}") from error
        except (ConnectionError, TimeoutError) as error:
            raise AudioFetchError(f"Network error downloading audio: {error}") from error

        filepath = _extract_audio_filepath(info)
        if not filepath or not Path(filepath).exists():
            raise AudioFetchError(f"Audio file was not downloaded: {source_link}")

        logger.info("Audio downloaded: %s", filepath)
        return Path(filepath)
