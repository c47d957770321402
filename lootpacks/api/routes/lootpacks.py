from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Path

from lootpacks.core.logging import lootpack_log_context
from lootpacks.db.session import SessionLocal
from lootpacks.economy.lootpacks.errors import (
    LootpackInvariantError,
    LootpackValidationError,
    PackTypeNotFoundError,
)
from lootpacks.economy.lootpacks.service import LootpackService

from .lootpacks_helpers import (
    _inventory_as_response,
    _open_result_as_response,
    _pack_type_as_response,
    _stats_as_response,
)
from .lootpacks_models import (
    InventoryResponse,
    OpenPackResponse,
    PackTypeListResponse,
    UserStatsResponse,
)

router = APIRouter(prefix="/lootpacks", tags=["lootpacks"])
logger = structlog.get_logger(__name__)


@router.get("/pack-types", response_model=PackTypeListResponse)
async def list_pack_types() -> PackTypeListResponse:
    async with SessionLocal.begin() as session:
        pack_types = await LootpackService.list_pack_types(session)
        return PackTypeListResponse(
            pack_types=[_pack_type_as_response(pack_type) for pack_type in pack_types]
        )


@router.get("/users/{user_id}/stats", response_model=UserStatsResponse)
async def get_user_stats(user_id: str = Path(min_length=1, max_length=128)) -> UserStatsResponse:
    now_utc = datetime.now(timezone.utc)
    with lootpack_log_context(user_id=user_id):
        try:
            async with SessionLocal.begin() as session:
                stats = await LootpackService.get_user_stats(session, user_id=user_id, now_utc=now_utc)
        except LootpackInvariantError as exc:
            logger.error("lootpack_stats_invariant_failed", error=str(exc))
            raise HTTPException(status_code=500, detail={"code": "E_INTERNAL"}) from exc

    return _stats_as_response(stats)


@router.post("/users/{user_id}/packs/{pack_type_id}/open", response_model=OpenPackResponse)
async def open_pack(
    pack_type_id: UUID,
    user_id: str = Path(min_length=1, max_length=128),
) -> OpenPackResponse:
    now_utc = datetime.now(timezone.utc)
    with lootpack_log_context(user_id=user_id, pack_type_id=pack_type_id):
        try:
            async with SessionLocal.begin() as session:
                result = await LootpackService.open_pack(
                    session,
                    user_id=user_id,
                    pack_type_id=pack_type_id,
                    now_utc=now_utc,
                )
        except PackTypeNotFoundError as exc:
            raise HTTPException(status_code=404, detail={"code": "E_PACK_NOT_FOUND"}) from exc
        except LootpackValidationError as exc:
            logger.info("lootpack_open_rejected", code=exc.code)
            raise HTTPException(
                status_code=400,
                detail={"code": exc.code, "message": exc.message},
            ) from exc
        except LootpackInvariantError as exc:
            logger.error("lootpack_open_invariant_failed", error=str(exc))
            raise HTTPException(status_code=500, detail={"code": "E_INTERNAL"}) from exc

    return _open_result_as_response(result)


@router.get("/users/{user_id}/inventory", response_model=InventoryResponse)
async def get_user_inventory(user_id: str = Path(min_length=1, max_length=128)) -> InventoryResponse:
    now_utc = datetime.now(timezone.utc)
    with lootpack_log_context(user_id=user_id):
        async with SessionLocal.begin() as session:
            summary = await LootpackService.get_user_inventory(session, user_id=user_id, now_utc=now_utc)
            return _inventory_as_response(summary)
