# cliprecipe/app/services/recipe_pipeline.py
"""
Link-to-recipe orchestration.

Runs identity -> cache check -> audio fetch -> conversion -> transcription
-> normalisation -> extraction -> assembly -> persistence, strictly in
that order. A stored record short-circuits everything after the cache
check. Any failure aborts the run without persisting; the run's temporary
files are removed either way.
"""
from __future__ import annotations

import logging
import shutil
import tempfile
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from cliprecipe.app.domain.errors import (
    InternalPipelineError,
    InvalidInputError,
    PipelineTimeoutError,
    RecipePipelineError,
)
from cliprecipe.app.domain.models import PipelineRun, PipelineStage, RecipeRecord
from cliprecipe.app.infra.media.base import AudioFetcher, FormatConverter, Transcriber
from cliprecipe.app.infra.store.base import RecipeStore
from cliprecipe.services.assembler import assemble_recipe
from cliprecipe.services.ids import derive_recipe_id
from cliprecipe.services.ingredients import extract_ingredients
from cliprecipe.services.steps import extract_steps
from cliprecipe.services.text import normalize_text

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 540
WORK_DIR_PREFIX_CHARS = 12


@dataclass
class Deadline:
    timeout_seconds: float
    clock: Callable[[], float] = time.monotonic
    started_at: float = field(init=False)

    def __post_init__(self) -> None:
        self.started_at = self.clock()

    def remaining(self) -> float:
        return self.timeout_seconds - (self.clock() - self.started_at)

    def check(self, stage: PipelineStage) -> None:
        if self.remaining() <= 0:
            raise PipelineTimeoutError(self.timeout_seconds, stage=stage.value)


def _validate_source_link(source_link: object) -> str:
    if not isinstance(source_link, str) or not source_link.strip():
        raise InvalidInputError("sourceLink is required", stage=PipelineStage.IDLE.value)
    return source_link


class RecipePipeline:
    def __init__(
        self,
        store: RecipeStore,
        audio_fetcher: AudioFetcher,
        format_converter: FormatConverter,
        transcriber: Transcriber,
        temp_dir: Optional[Path] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.audio_fetcher = audio_fetcher
        self.format_converter = format_converter
        self.transcriber = transcriber
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()) / "cliprecipe"
        self.timeout_seconds = timeout_seconds
        self.clock = clock

    def get_recipe(self, recipe_id: str) -> Optional[RecipeRecord]:
        try:
            return self.store.get(recipe_id)
        except RecipePipelineError:
            raise
        except Exception as error:
            logger.error("recipe.read_fail id=%s error=%s", recipe_id, error)
            raise InternalPipelineError(
                f"Unexpected store error: {error}",
                stage=PipelineStage.CACHE_CHECKED.value,
            ) from error

    def process(self, source_link: str, prefer_lang: Optional[str] = None) -> RecipeRecord:
        run = self.execute(source_link, prefer_lang)
        if run.record is None:
            raise InternalPipelineError("Pipeline finished without a record", stage=run.stage.value)
        return run.record

    def execute(self, source_link: str, prefer_lang: Optional[str] = None) -> PipelineRun:
        run = PipelineRun()
        started = self.clock()
        try:
            self._execute(run, source_link, prefer_lang)
        except RecipePipelineError as error:
            self._fail(run, error)
            raise
        except Exception as error:
            wrapped = InternalPipelineError(f"Unexpected pipeline error: {error}")
            self._fail(run, wrapped)
            raise wrapped from error

        logger.info(
            "recipe.done id=%s stage=%s dt=%.2fs",
            run.recipe_id,
            run.stage.value,
            self.clock() - started,
        )
        return run

    def _execute(self, run: PipelineRun, source_link: str, prefer_lang: Optional[str]) -> None:
        link = _validate_source_link(source_link)

        run.recipe_id = derive_recipe_id(link)
        run.advance(PipelineStage.IDENTITY_COMPUTED)

        run.attempting = PipelineStage.CACHE_CHECKED
        existing = self.store.get(run.recipe_id)
        run.advance(PipelineStage.CACHE_CHECKED)
        if existing is not None:
            logger.info("recipe.cache_hit id=%s", run.recipe_id)
            run.record = existing
            run.advance(PipelineStage.CACHE_HIT)
            return

        logger.info("recipe.start id=%s url=%s lang=%s", run.recipe_id, link, prefer_lang or "auto")
        deadline = Deadline(self.timeout_seconds, clock=self.clock)
        work_dir: Optional[Path] = None

        try:
            self._enter(run, deadline, PipelineStage.AUDIO_FETCHED)
            work_dir = self._create_work_dir(run.recipe_id)
            audio_path = self.audio_fetcher.fetch(link, work_dir)
            run.advance(PipelineStage.AUDIO_FETCHED)

            self._enter(run, deadline, PipelineStage.CONVERTED_TO_WAV)
            wav_path = self.format_converter.convert(audio_path, timeout_seconds=deadline.remaining())
            run.advance(PipelineStage.CONVERTED_TO_WAV)

            self._enter(run, deadline, PipelineStage.TRANSCRIBED)
            transcription = self.transcriber.transcribe(wav_path, prefer_lang)
            run.advance(PipelineStage.TRANSCRIBED)

            self._enter(run, deadline, PipelineStage.NORMALIZED)
            text = normalize_text(transcription.text)
            run.advance(PipelineStage.NORMALIZED)

            self._enter(run, deadline, PipelineStage.EXTRACTED)
            ingredients = extract_ingredients(text)
            steps = extract_steps(text)
            run.advance(PipelineStage.EXTRACTED)

            self._enter(run, deadline, PipelineStage.ASSEMBLED)
            record = assemble_recipe(
                recipe_id=run.recipe_id,
                source_link=link,
                language=transcription.language,
                text=text,
                ingredients=ingredients,
                steps=steps,
            )
            run.advance(PipelineStage.ASSEMBLED)

            self._enter(run, deadline, PipelineStage.PERSISTED)
            self.store.put(record)
            run.record = record
            run.advance(PipelineStage.PERSISTED)

            logger.info(
                "recipe.persisted id=%s ingredients=%d steps=%d lang=%s",
                record.recipe_id,
                len(record.ingredients),
                len(record.steps),
                record.lang,
            )
        finally:
            self._cleanup_work_dir(work_dir)

    @staticmethod
    def _enter(run: PipelineRun, deadline: Deadline, stage: PipelineStage) -> None:
        run.attempting = stage
        deadline.check(stage)

    def _fail(self, run: PipelineRun, error: RecipePipelineError) -> None:
        if error.stage is None:
            error.stage = (run.attempting or run.stage).value
        run.advance(PipelineStage.FAILED)
        logger.error(
            "recipe.fail id=%s stage=%s code=%s error=%s",
            run.recipe_id,
            error.stage,
            error.code,
            error,
        )

    def _create_work_dir(self, recipe_id: str) -> Path:
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        # Unique per run: concurrent runs of the same link never share files.
        prefix = f"run_{recipe_id[:WORK_DIR_PREFIX_CHARS]}_"
        return Path(tempfile.mkdtemp(prefix=prefix, dir=self.temp_dir))

    def _cleanup_work_dir(self, work_dir: Optional[Path]) -> None:
        if work_dir is None or not work_dir.exists():
            return

        try:
            shutil.rmtree(work_dir)
            logger.debug("Cleaned up work dir: %s", work_dir)
        except OSError as os_error:
            logger.warning("Failed to cleanup work dir %s: %s", work_dir, os_error)
