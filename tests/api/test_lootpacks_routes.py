from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest
import structlog
from fastapi.testclient import TestClient

from lootpacks.api.routes import lootpacks as lootpacks_routes
from lootpacks.economy.lootpacks.errors import (
    AdRequiredError,
    DailyPackCooldownError,
    InsufficientBalanceError,
    LootpackInvariantError,
    PackTypeNotFoundError,
)
from lootpacks.economy.lootpacks.types import (
    GeneratedReward,
    InventorySummary,
    LootpackStatsView,
    OpenPackResult,
)
from lootpacks.main import app
from tests.api.lootpack_api_helpers import DummySessionLocal

NOW_UTC = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _stats_view(**overrides) -> LootpackStatsView:  # noqa: ANN003
    values = {
        "deal_coins": 80,
        "daily_streak": 1,
        "total_packs_opened": 3,
        "level": 1,
        "level_progress": 30,
        "member_status": "Bronze",
        "can_claim_daily": True,
        "next_daily_claim": None,
    }
    values.update(overrides)
    return LootpackStatsView(**values)


@pytest.fixture(autouse=True)
def dummy_session(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(lootpacks_routes, "SessionLocal", DummySessionLocal())


def _patch_open_pack(monkeypatch: pytest.MonkeyPatch, error: Exception) -> None:
    async def fake_open_pack(session, **kwargs):  # noqa: ANN001, ANN003
        raise error

    monkeypatch.setattr(lootpacks_routes.LootpackService, "open_pack", fake_open_pack)


def test_list_pack_types(monkeypatch: pytest.MonkeyPatch) -> None:
    pack_type = SimpleNamespace(
        id=uuid4(),
        name="Daily Pack",
        type="free",
        description="One free pack per day",
        icon="gift",
        color_gradient="from-green-400 to-blue-500",
        price_coins=None,
        cooldown_hours=24,
        min_rewards=1,
        max_rewards=2,
        possible_reward_types=["points", "coupon"],
    )

    async def fake_list_pack_types(session):  # noqa: ANN001
        return [pack_type]

    monkeypatch.setattr(lootpacks_routes.LootpackService, "list_pack_types", fake_list_pack_types)

    response = TestClient(app).get("/lootpacks/pack-types")

    assert response.status_code == 200
    [payload] = response.json()["pack_types"]
    assert payload["id"] == str(pack_type.id)
    assert payload["type"] == "free"
    assert payload["price_coins"] is None
    assert payload["possible_reward_types"] == ["points", "coupon"]


def test_get_user_stats(monkeypatch: pytest.MonkeyPatch) -> None:
    next_claim = NOW_UTC + timedelta(hours=5)

    async def fake_get_user_stats(session, *, user_id, now_utc):  # noqa: ANN001
        assert user_id == "user-42"
        return _stats_view(can_claim_daily=False, next_daily_claim=next_claim)

    monkeypatch.setattr(lootpacks_routes.LootpackService, "get_user_stats", fake_get_user_stats)

    response = TestClient(app).get("/lootpacks/users/user-42/stats")

    assert response.status_code == 200
    payload = response.json()
    assert payload["deal_coins"] == 80
    assert payload["can_claim_daily"] is False
    assert datetime.fromisoformat(payload["next_daily_claim"]) == next_claim


def test_open_pack_returns_rewards_and_updated_stats(monkeypatch: pytest.MonkeyPatch) -> None:
    history_id = uuid4()
    reward = GeneratedReward(
        reward_id=uuid4(),
        template_id=uuid4(),
        kind="coupon",
        title="20% off",
        value="20%",
        description="Any order",
        rarity="rare",
        code="SAVE123",
        expires_at=NOW_UTC + timedelta(days=7),
    )

    async def fake_open_pack(session, *, user_id, pack_type_id, now_utc):  # noqa: ANN001
        return OpenPackResult(pack_history_id=history_id, rewards=(reward,), stats=_stats_view())

    monkeypatch.setattr(lootpacks_routes.LootpackService, "open_pack", fake_open_pack)

    response = TestClient(app).post(f"/lootpacks/users/user-1/packs/{uuid4()}/open")

    assert response.status_code == 200
    payload = response.json()
    assert payload["pack_history_id"] == str(history_id)
    assert payload["rewards"][0]["id"] == str(reward.reward_id)
    assert payload["rewards"][0]["type"] == "coupon"
    assert payload["rewards"][0]["code"] == "SAVE123"
    assert payload["updated_stats"]["deal_coins"] == 80


@pytest.mark.parametrize(
    ("error", "expected_status", "expected_detail"),
    [
        (PackTypeNotFoundError(), 404, {"code": "E_PACK_NOT_FOUND"}),
        (
            DailyPackCooldownError(),
            400,
            {"code": "E_DAILY_COOLDOWN", "message": "Daily pack still on cooldown"},
        ),
        (
            AdRequiredError(),
            400,
            {"code": "E_AD_REQUIRED", "message": "Please watch an ad to claim your daily free pack"},
        ),
        (
            InsufficientBalanceError(),
            400,
            {"code": "E_INSUFFICIENT_BALANCE", "message": "Insufficient DealCoins"},
        ),
        (LootpackInvariantError("stats row missing"), 500, {"code": "E_INTERNAL"}),
    ],
)
def test_open_pack_maps_domain_errors(
    monkeypatch: pytest.MonkeyPatch,
    error: Exception,
    expected_status: int,
    expected_detail: dict[str, str],
) -> None:
    _patch_open_pack(monkeypatch, error)

    response = TestClient(app).post(f"/lootpacks/users/user-1/packs/{uuid4()}/open")

    assert response.status_code == expected_status
    assert response.json() == {"detail": expected_detail}


def test_open_pack_rejects_malformed_pack_type_id() -> None:
    response = TestClient(app).post("/lootpacks/users/user-1/packs/not-a-uuid/open")

    assert response.status_code == 422


def test_get_user_inventory(monkeypatch: pytest.MonkeyPatch) -> None:
    row = SimpleNamespace(
        id=uuid4(),
        pack_history_id=uuid4(),
        template_id=uuid4(),
        type="points",
        title="50 DealCoins",
        value="+50",
        description=None,
        code=None,
        rarity="common",
        source="Daily Pack",
        expires_at=None,
        is_used=False,
        used_at=None,
        created_at=NOW_UTC,
    )

    async def fake_get_user_inventory(session, *, user_id, now_utc):  # noqa: ANN001
        return InventorySummary(rewards=[row], active_count=1, used_count=0, expiring_soon_count=0)

    monkeypatch.setattr(
        lootpacks_routes.LootpackService,
        "get_user_inventory",
        fake_get_user_inventory,
    )

    response = TestClient(app).get("/lootpacks/users/user-1/inventory")

    assert response.status_code == 200
    payload = response.json()
    assert payload["rewards"][0]["source"] == "Daily Pack"
    assert payload["stats"] == {
        "active_count": 1,
        "used_count": 0,
        "expiring_soon_count": 0,
        "total_value_estimate": None,
    }


def test_open_pack_binds_user_and_pack_type_to_log_context(monkeypatch: pytest.MonkeyPatch) -> None:
    pack_type_id = uuid4()
    seen_context: list[dict[str, object]] = []

    async def fake_open_pack(session, **kwargs):  # noqa: ANN001, ANN003
        seen_context.append(structlog.contextvars.get_contextvars())
        raise PackTypeNotFoundError(str(pack_type_id))

    monkeypatch.setattr(lootpacks_routes.LootpackService, "open_pack", fake_open_pack)

    response = TestClient(app).post(f"/lootpacks/users/user-7/packs/{pack_type_id}/open")

    assert response.status_code == 404
    assert seen_context == [{"user_id": "user-7", "pack_type_id": str(pack_type_id)}]
