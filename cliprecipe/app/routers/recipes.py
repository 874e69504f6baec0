# cliprecipe/app/routers/recipes.py
from __future__ import annotations

import asyncio
import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from cliprecipe.app.deps import CurrentUser, get_current_user, get_pipeline, http_error
from cliprecipe.app.domain.errors import PipelineTimeoutError, RecipePipelineError
from cliprecipe.app.schemas.recipes import RecipeResponse, TranscribeRequest
from cliprecipe.app.services.recipe_pipeline import RecipePipeline

log = logging.getLogger("recipes")
router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("/transcribe", response_model=RecipeResponse)
async def transcribe_from_link(
    body: TranscribeRequest,
    user: CurrentUser = Depends(get_current_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeResponse:
    t0 = time.time()
    log.info("transcribe.start url=%s owner=%s", body.sourceLink, user.id)
    try:
        # The pipeline checks the same ceiling between stages, so a run
        # abandoned here never reaches the store.
        record = await asyncio.wait_for(
            run_in_threadpool(pipeline.process, body.sourceLink, body.preferLang),
            timeout=pipeline.timeout_seconds,
        )
    except asyncio.TimeoutError as exc:
        dt = time.time() - t0
        log.warning("transcribe.timeout url=%s dt=%.2fs", body.sourceLink, dt)
        raise http_error(PipelineTimeoutError(pipeline.timeout_seconds)) from exc
    except RecipePipelineError as exc:
        dt = time.time() - t0
        log.warning(
            "transcribe.fail url=%s code=%s stage=%s dt=%.2fs",
            body.sourceLink,
            exc.code,
            exc.stage,
            dt,
        )
        raise http_error(exc) from exc

    dt = time.time() - t0
    log.info("transcribe.ok url=%s recipe=%s dt=%.2fs", body.sourceLink, record.recipe_id, dt)
    return RecipeResponse.from_record(record)


@router.get("/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    pipeline: RecipePipeline = Depends(get_pipeline),
) -> RecipeResponse:
    try:
        record = await run_in_threadpool(pipeline.get_recipe, recipe_id)
    except RecipePipelineError as exc:
        log.exception("recipe.read_fail recipe=%s owner=%s", recipe_id, user.id)
        raise http_error(exc) from exc

    if record is None:
        raise HTTPException(status_code=404, detail={"code": "not-found", "message": "Recipe not found"})
    return RecipeResponse.from_record(record)
