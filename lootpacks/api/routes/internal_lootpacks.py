from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, HTTPException, Request

from lootpacks.core.config import get_settings
from lootpacks.db.repo.pack_types_repo import PackTypesRepo
from lootpacks.db.repo.reward_templates_repo import RewardTemplatesRepo
from lootpacks.db.session import SessionLocal
from lootpacks.economy.lootpacks.pool_cache import reward_pool_cache
from lootpacks.services.internal_auth import evaluate_internal_access

from .lootpacks_models import (
    RewardMappingUpsertRequest,
    RewardMappingUpsertResponse,
    RewardPoolInvalidateRequest,
    RewardPoolInvalidateResponse,
)

router = APIRouter(prefix="/internal/lootpacks", tags=["internal", "lootpacks"])
logger = structlog.get_logger(__name__)


def _assert_internal_access(request: Request) -> None:
    settings = get_settings()
    decision = evaluate_internal_access(
        request,
        expected_token=settings.internal_api_token,
        allowlist=settings.internal_api_allowlist,
        trusted_proxies=getattr(settings, "internal_api_trusted_proxies", ""),
    )
    if not decision.allowed:
        logger.warning(
            "internal_lootpacks_auth_failed",
            reason=decision.reason,
            client_ip=decision.client_ip,
            path=request.url.path,
        )
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})


@router.put(
    "/pack-types/{pack_type_id}/rewards/{template_id}",
    response_model=RewardMappingUpsertResponse,
)
async def upsert_reward_mapping(
    pack_type_id: UUID,
    template_id: UUID,
    payload: RewardMappingUpsertRequest,
    request: Request,
) -> RewardMappingUpsertResponse:
    _assert_internal_access(request)

    async with SessionLocal.begin() as session:
        pack_type = await PackTypesRepo.get_by_id(session, pack_type_id)
        if pack_type is None:
            raise HTTPException(status_code=404, detail={"code": "E_PACK_NOT_FOUND"})
        template = await RewardTemplatesRepo.get_by_id(session, template_id)
        if template is None:
            raise HTTPException(status_code=404, detail={"code": "E_TEMPLATE_NOT_FOUND"})

        await RewardTemplatesRepo.upsert_mapping(
            session,
            pack_type_id=pack_type_id,
            reward_template_id=template_id,
            weight=payload.weight,
        )

    # After commit: the next rebuild must read the new weight.
    reward_pool_cache.invalidate(pack_type_id)
    logger.info(
        "internal_reward_mapping_upserted",
        pack_type_id=str(pack_type_id),
        reward_template_id=str(template_id),
        weight=payload.weight,
    )
    return RewardMappingUpsertResponse(
        pack_type_id=pack_type_id,
        reward_template_id=template_id,
        weight=payload.weight,
        pool_invalidated=True,
    )


@router.post("/reward-pools/invalidate", response_model=RewardPoolInvalidateResponse)
async def invalidate_reward_pools(
    payload: RewardPoolInvalidateRequest,
    request: Request,
) -> RewardPoolInvalidateResponse:
    _assert_internal_access(request)

    if payload.pack_type_id is None:
        reward_pool_cache.clear()
        return RewardPoolInvalidateResponse(scope="all")

    reward_pool_cache.invalidate(payload.pack_type_id)
    return RewardPoolInvalidateResponse(scope="pack_type", pack_type_id=payload.pack_type_id)
