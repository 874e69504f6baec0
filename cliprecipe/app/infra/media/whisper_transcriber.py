# cliprecipe/app/infra/media/whisper_transcriber.py
"""
faster-whisper transcription adapter.
The model is loaded lazily on first use and held by the instance.
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from cliprecipe.app.domain.errors import NoSpeechDetectedError, TranscriptionServiceError
from cliprecipe.app.domain.models import TranscriptionResult
from cliprecipe.app.infra.media.base import Transcriber

if TYPE_CHECKING:
    from faster_whisper import WhisperModel

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "small"
DEFAULT_BEAM_SIZE = 5
DEFAULT_BEST_OF = 5


def detect_device(preference: str = "auto") -> tuple[str, str]:
    """
    Pick the device and compute_type for faster-whisper.

    Returns:
        Tuple of (device, compute_type)
    """
    if preference == "cuda":
        return "cuda", "float16"
    if preference == "cpu":
        return "cpu", "int8"

    try:
        import ctranslate2

        if "float16" in ctranslate2.get_supported_compute_types("cuda"):
            logger.info("CUDA detected via ctranslate2, using GPU with float16")
            return "cuda", "float16"
    except Exception as exc:
        logger.debug("Error detecting CUDA via ctranslate2: %s", exc)

    logger.info("GPU not available, using CPU with int8 (quantized)")
    return "cpu", "int8"


class WhisperTranscriber(Transcriber):
    def __init__(
        self,
        model_name: str = DEFAULT_MODEL,
        device: str = "auto",
        beam_size: int = DEFAULT_BEAM_SIZE,
    ):
        self.model_name = model_name
        self.device = device
        self.beam_size = beam_size
        self._model: Optional["WhisperModel"] = None
        self._model_lock = threading.Lock()

    def _get_model(self) -> "WhisperModel":
        with self._model_lock:
            if self._model is not None:
                return self._model

            try:
                from faster_whisper import WhisperModel as _WhisperModel
            except ImportError as exc:
                raise TranscriptionServiceError(f"faster-whisper is not installed: {exc}") from exc

            device, compute_type = detect_device(self.device)
            logger.info(
                "Initializing faster-whisper: model=%s, device=%s, compute_type=%s",
                self.model_name,
                device,
                compute_type,
            )
            try:
                self._model = _WhisperModel(self.model_name, device=device, compute_type=compute_type)
            except Exception as exc:
                raise TranscriptionServiceError(f"Failed to initialize faster-whisper: {exc}") from exc

            return self._model

    def transcribe(self, wav_path: Path, prefer_lang: Optional[str] = None) -> TranscriptionResult:
        if not wav_path.exists():
            raise TranscriptionServiceError(f"Media file not found: {wav_path}")

        model = self._get_model()

        try:
            logger.info("Starting transcription: path=%s, language=%s", wav_path, prefer_lang or "auto")
            segments_iter, info = model.transcribe(
                str(wav_path),
                language=prefer_lang or None,
                beam_size=self.beam_size,
                best_of=DEFAULT_BEST_OF,
                temperature=0.0,
                condition_on_previous_text=False,
                vad_filter=True,
            )
            parts = [segment.text.strip() for segment in segments_iter]
        except Exception as exc:
            raise TranscriptionServiceError(f"Transcription failed: {exc}") from exc

        text = " ".join(part for part in parts if part).strip()
        if not text:
            raise NoSpeechDetectedError(str(wav_path))

        language = getattr(info, "language", None) or prefer_lang or "unknown"
        duration_sec = float(getattr(info, "duration", 0.0) or 0.0)

        logger.info(
            "Transcription complete: duration=%.1fs, chars=%d, language=%s",
            duration_sec,
            len(text),
            language,
        )
        return TranscriptionResult(
            text=text,
            language=language,
            duration_sec=duration_sec,
            model_version=self.model_name,
        )
