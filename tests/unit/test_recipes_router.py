from __future__ import annotations

import threading
import time
from pathlib import Path
from types import SimpleNamespace
from typing import Optional
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from cliprecipe.app.deps import CurrentUser, get_current_user
from cliprecipe.app.domain.errors import AudioFetchError, PipelineTimeoutError
from cliprecipe.app.domain.models import TranscriptionResult
from cliprecipe.app.infra.media.base import AudioFetcher, FormatConverter, Transcriber
from cliprecipe.app.infra.store.memory import InMemoryRecipeStore
from cliprecipe.app.infra.store.supabase_store import SupabaseRecipeStore
from cliprecipe.app.main import create_app
from cliprecipe.app.services.recipe_pipeline import RecipePipeline
from cliprecipe.services.ids import derive_recipe_id

LINK = "https://www.youtube.com/watch?v=_nJw6nnQms8"


class FetcherStub(AudioFetcher):
    def __init__(self) -> None:
        self.error: Optional[Exception] = None

    def fetch(self, source_link: str, work_dir: Path) -> Path:
        if self.error is not None:
            raise self.error
        path = work_dir / "audio.m4a"
        path.write_bytes(b"audio")
        return path


class ConverterStub(FormatConverter):
    def convert(self, audio_path: Path, timeout_seconds: Optional[float] = None) -> Path:
        return audio_path


class TranscriberStub(Transcriber):
    def transcribe(self, wav_path: Path, prefer_lang: Optional[str] = None) -> TranscriptionResult:
        return TranscriptionResult(text="Step 1: boil the pasta for 8 minutes", language=prefer_lang or "en")


@pytest.fixture
def fetcher() -> FetcherStub:
    return FetcherStub()


@pytest.fixture
def pipeline(tmp_path, fetcher) -> RecipePipeline:
    return RecipePipeline(
        store=InMemoryRecipeStore(),
        audio_fetcher=fetcher,
        format_converter=ConverterStub(),
        transcriber=TranscriberStub(),
        temp_dir=tmp_path,
    )


@pytest.fixture
def client(pipeline) -> TestClient:
    app = create_app(pipeline=pipeline, supabase=None)
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="user-1", email="cook@example.com")
    return TestClient(app)


class TestTranscribe:
    def test_returns_recipe(self, client: TestClient) -> None:
        resp = client.post("/recipes/transcribe", json={"sourceLink": LINK, "preferLang": "en"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["recipeId"] == derive_recipe_id(LINK)
        assert body["creatorHandle"] == "YouTube Creator"
        assert body["sourceLink"] == LINK
        assert body["lang"] == "en"
        assert body["text"] == {"original": "Step 1: boil the pasta for 8 minutes", "ro": None}
        assert body["steps"][0]["index"] == 1
        assert body["steps"][0]["durationSec"] == 480

    def test_second_request_is_identical(self, client: TestClient, fetcher: FetcherStub) -> None:
        first = client.post("/recipes/transcribe", json={"sourceLink": LINK})
        fetcher.error = AudioFetchError("should not be fetched again")
        second = client.post("/recipes/transcribe", json={"sourceLink": LINK})

        assert second.status_code == 200
        assert second.json() == first.json()

    @pytest.mark.parametrize("payload", [{}, {"sourceLink": ""}, {"sourceLink": "   "}])
    def test_missing_link(self, client: TestClient, payload: dict) -> None:
        resp = client.post("/recipes/transcribe", json=payload)
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "invalid-argument"

    def test_external_tool_failure(self, client: TestClient, fetcher: FetcherStub) -> None:
        fetcher.error = AudioFetchError("no audio track")
        resp = client.post("/recipes/transcribe", json={"sourceLink": LINK})
        assert resp.status_code == 502
        assert resp.json()["detail"] == {"code": "external-tool-failure", "message": "no audio track"}

    def test_timeout(self, client: TestClient, fetcher: FetcherStub) -> None:
        fetcher.error = PipelineTimeoutError(540)
        resp = client.post("/recipes/transcribe", json={"sourceLink": LINK})
        assert resp.status_code == 504
        assert resp.json()["detail"]["code"] == "deadline-exceeded"

    def test_requires_authentication(self, pipeline) -> None:
        client = TestClient(create_app(pipeline=pipeline, supabase=None))
        resp = client.post("/recipes/transcribe", json={"sourceLink": LINK})
        assert resp.status_code == 401
        assert resp.json()["detail"]["code"] == "unauthenticated"


class TestGetRecipe:
    def test_not_found(self, client: TestClient) -> None:
        resp = client.get("/recipes/does-not-exist")
        assert resp.status_code == 404
        assert resp.json()["detail"]["code"] == "not-found"

    def test_found_after_transcribe(self, client: TestClient) -> None:
        created = client.post("/recipes/transcribe", json={"sourceLink": LINK}).json()
        resp = client.get(f"/recipes/{created['recipeId']}")
        assert resp.status_code == 200
        assert resp.json() == created

    def test_store_failure_is_structured(self, tmp_path) -> None:
        supabase = MagicMock()
        query = supabase.table.return_value.select.return_value.eq.return_value.limit.return_value
        query.execute.side_effect = httpx.ConnectError("Connection refused")
        pipeline = RecipePipeline(
            store=SupabaseRecipeStore(supabase),
            audio_fetcher=FetcherStub(),
            format_converter=ConverterStub(),
            transcriber=TranscriberStub(),
            temp_dir=tmp_path,
        )
        app = create_app(pipeline=pipeline, supabase=None)
        app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="user-1")

        resp = TestClient(app).get("/recipes/abc")

        assert resp.status_code == 500
        assert resp.json()["detail"]["code"] == "internal"
        assert "Connection refused" in resp.json()["detail"]["message"]


class SlowTranscriber(TranscriberStub):
    def __init__(self, delay: float) -> None:
        self.delay = delay

    def transcribe(self, wav_path: Path, prefer_lang: Optional[str] = None) -> TranscriptionResult:
        time.sleep(self.delay)
        return super().transcribe(wav_path, prefer_lang)


class SignallingPipeline(RecipePipeline):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.finished = threading.Event()

    def process(self, source_link: str, prefer_lang: Optional[str] = None):
        try:
            return super().process(source_link, prefer_lang)
        finally:
            self.finished.set()


class TestWallClockCeiling:
    def test_slow_run_answers_504_and_never_persists(self, tmp_path) -> None:
        store = InMemoryRecipeStore()
        pipeline = SignallingPipeline(
            store=store,
            audio_fetcher=FetcherStub(),
            format_converter=ConverterStub(),
            transcriber=SlowTranscriber(delay=2.0),
            temp_dir=tmp_path,
            timeout_seconds=0.5,
        )
        app = create_app(pipeline=pipeline, supabase=None)
        app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="user-1")

        started = time.monotonic()
        resp = TestClient(app).post("/recipes/transcribe", json={"sourceLink": LINK})
        elapsed = time.monotonic() - started

        assert resp.status_code == 504
        assert resp.json()["detail"]["code"] == "deadline-exceeded"
        assert elapsed < 2.0

        # the abandoned run fails its next deadline check
        assert pipeline.finished.wait(timeout=10)
        assert len(store) == 0


class TestAuth:
    def test_me_with_valid_token(self, pipeline) -> None:
        supabase = MagicMock()
        supabase.auth.get_user.return_value = SimpleNamespace(
            user=SimpleNamespace(id="u-42", email="cook@example.com", user_metadata={"name": "Cook"})
        )
        client = TestClient(create_app(pipeline=pipeline, supabase=supabase))

        resp = client.get("/auth/me", headers={"Authorization": "Bearer token-123"})

        assert resp.status_code == 200
        assert resp.json() == {"id": "u-42", "email": "cook@example.com", "name": "Cook"}
        supabase.auth.get_user.assert_called_once_with("token-123")

    def test_me_with_rejected_token(self, pipeline) -> None:
        supabase = MagicMock()
        supabase.auth.get_user.side_effect = RuntimeError("JWT expired")
        client = TestClient(create_app(pipeline=pipeline, supabase=supabase))

        resp = client.get("/auth/me", headers={"Authorization": "Bearer stale"})
        assert resp.status_code == 401

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"ok": True}
