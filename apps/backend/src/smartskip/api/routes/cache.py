"""Cache management endpoints."""

from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException

from smartskip.api.deps import get_cache
from smartskip.api.schemas import AnalysisResponse, InvalidateResponse, SweepRequest, SweepResponse
from smartskip.errors import StorageError
from smartskip.services.cache import CacheStats, CacheStore

router = APIRouter(prefix="/api/v1/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStats)
async def cache_stats(cache: CacheStore = Depends(get_cache)) -> CacheStats:
    try:
        return await cache.stats()
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=exc.user_message) from exc


@router.post("/sweep", response_model=SweepResponse)
async def sweep_cache(
    req: SweepRequest | None = None,
    cache: CacheStore = Depends(get_cache),
) -> SweepResponse:
    max_age = timedelta(days=req.max_age_days) if req and req.max_age_days is not None else None
    try:
        deleted = await cache.sweep_stale(max_age)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=exc.user_message) from exc
    return SweepResponse(deleted=deleted)


@router.get("/{video_id}", response_model=AnalysisResponse)
async def get_cached(video_id: str, cache: CacheStore = Depends(get_cache)) -> AnalysisResponse:
    try:
        result = await cache.get(video_id)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=exc.user_message) from exc
    if result is None:
        raise HTTPException(status_code=404, detail=f"No cached analysis for {video_id}")
    return AnalysisResponse.from_result(result)


@router.delete("/{video_id}", response_model=InvalidateResponse)
async def invalidate_cached(video_id: str, cache: CacheStore = Depends(get_cache)) -> InvalidateResponse:
    try:
        await cache.invalidate(video_id)
    except StorageError as exc:
        raise HTTPException(status_code=503, detail=exc.user_message) from exc
    return InvalidateResponse(video_id=video_id)
