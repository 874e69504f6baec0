# cliprecipe/app/main.py
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from supabase import Client

from cliprecipe.app.config import Settings, settings
from cliprecipe.app.infra.media.ffmpeg_converter import FfmpegConverter
from cliprecipe.app.infra.media.whisper_transcriber import WhisperTranscriber
from cliprecipe.app.infra.media.ytdlp_fetcher import YtDlpAudioFetcher
from cliprecipe.app.infra.store.base import RecipeStore
from cliprecipe.app.infra.store.memory import InMemoryRecipeStore
from cliprecipe.app.infra.store.supabase_store import SupabaseRecipeStore, create_supabase_client
from cliprecipe.app.routers.auth import router as auth_router
from cliprecipe.app.routers.recipes import router as recipes_router
from cliprecipe.app.services.recipe_pipeline import RecipePipeline

# Plain stdout logging for dev and containers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def build_supabase_client(config: Settings) -> Optional[Client]:
    if not config.supabase_configured:
        logger.warning("Supabase not configured; authenticated routes will reject every caller")
        return None
    return create_supabase_client(str(config.SUPABASE_URL), config.SUPABASE_SERVICE_ROLE_KEY)


def build_store(config: Settings, client: Optional[Client]) -> RecipeStore:
    if config.RECIPE_STORE == "supabase":
        if client is None:
            raise ValueError("RECIPE_STORE=supabase requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
        return SupabaseRecipeStore(client, table_name=config.RECIPES_TABLE)
    return InMemoryRecipeStore()


def build_pipeline(config: Settings, store: RecipeStore) -> RecipePipeline:
    return RecipePipeline(
        store=store,
        audio_fetcher=YtDlpAudioFetcher(audio_format=config.YTDLP_FORMAT),
        format_converter=FfmpegConverter(binary=config.FFMPEG_BINARY),
        transcriber=WhisperTranscriber(
            model_name=config.WHISPER_MODEL,
            device=config.WHISPER_DEVICE,
            beam_size=config.WHISPER_BEAM_SIZE,
        ),
        temp_dir=Path(config.PIPELINE_TEMP_DIR),
        timeout_seconds=config.PIPELINE_TIMEOUT_SECONDS,
    )


def create_app(
    config: Settings = settings,
    pipeline: Optional[RecipePipeline] = None,
    supabase: Optional[Client] = None,
) -> FastAPI:
    app = FastAPI(title="Clip Recipe API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.FRONTEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(recipes_router)
    app.include_router(auth_router)

    if supabase is None and pipeline is None:
        supabase = build_supabase_client(config)
    if pipeline is None:
        pipeline = build_pipeline(config, build_store(config, supabase))

    # One store handle per process, shared by every request through the pipeline.
    app.state.supabase = supabase
    app.state.pipeline = pipeline

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
