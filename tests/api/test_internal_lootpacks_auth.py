from __future__ import annotations

from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from lootpacks.api.routes import internal_lootpacks
from lootpacks.main import app
from tests.api.lootpack_api_helpers import DummySessionLocal, RecordingPoolCache

INTERNAL_TOKEN = "internal-secret"


@pytest.fixture()
def pool_cache(monkeypatch: pytest.MonkeyPatch) -> RecordingPoolCache:
    cache = RecordingPoolCache()
    monkeypatch.setattr(internal_lootpacks, "reward_pool_cache", cache)
    monkeypatch.setattr(internal_lootpacks, "SessionLocal", DummySessionLocal())
    monkeypatch.setattr(
        internal_lootpacks,
        "get_settings",
        lambda: SimpleNamespace(
            internal_api_token=INTERNAL_TOKEN,
            internal_api_allowlist="127.0.0.1/32",
        ),
    )
    return cache


def _install_catalog(
    monkeypatch: pytest.MonkeyPatch,
    *,
    pack_type: object | None,
    template: object | None,
) -> list[dict[str, object]]:
    upserts: list[dict[str, object]] = []

    async def fake_get_pack_type(session, pack_type_id):  # noqa: ANN001
        return pack_type

    async def fake_get_template(session, template_id):  # noqa: ANN001
        return template

    async def fake_upsert_mapping(session, **kwargs):  # noqa: ANN001, ANN003
        upserts.append(kwargs)

    monkeypatch.setattr(internal_lootpacks.PackTypesRepo, "get_by_id", fake_get_pack_type)
    monkeypatch.setattr(internal_lootpacks.RewardTemplatesRepo, "get_by_id", fake_get_template)
    monkeypatch.setattr(internal_lootpacks.RewardTemplatesRepo, "upsert_mapping", fake_upsert_mapping)
    return upserts


def test_internal_invalidate_rejects_missing_token(pool_cache: RecordingPoolCache) -> None:
    client = TestClient(app, client=("127.0.0.1", 5200))
    response = client.post("/internal/lootpacks/reward-pools/invalidate", json={})

    assert response.status_code == 403
    assert response.json() == {"detail": {"code": "E_FORBIDDEN"}}
    assert pool_cache.clear_calls == 0


def test_internal_invalidate_rejects_disallowed_ip(pool_cache: RecordingPoolCache) -> None:
    client = TestClient(app, client=("10.0.0.25", 5201))
    response = client.post(
        "/internal/lootpacks/reward-pools/invalidate",
        json={},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 403
    assert pool_cache.clear_calls == 0


def test_internal_invalidate_all_pools(pool_cache: RecordingPoolCache) -> None:
    client = TestClient(app, client=("127.0.0.1", 5202))
    response = client.post(
        "/internal/lootpacks/reward-pools/invalidate",
        json={},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 200
    assert response.json() == {"scope": "all", "pack_type_id": None}
    assert pool_cache.clear_calls == 1


def test_internal_invalidate_one_pool(pool_cache: RecordingPoolCache) -> None:
    pack_type_id = uuid4()
    client = TestClient(app, client=("127.0.0.1", 5203))
    response = client.post(
        "/internal/lootpacks/reward-pools/invalidate",
        json={"pack_type_id": str(pack_type_id)},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 200
    assert response.json() == {"scope": "pack_type", "pack_type_id": str(pack_type_id)}
    assert pool_cache.invalidated == [pack_type_id]
    assert pool_cache.clear_calls == 0


def test_internal_upsert_mapping_invalidates_pool(
    monkeypatch: pytest.MonkeyPatch,
    pool_cache: RecordingPoolCache,
) -> None:
    pack_type_id = uuid4()
    template_id = uuid4()
    upserts = _install_catalog(monkeypatch, pack_type=object(), template=object())

    client = TestClient(app, client=("127.0.0.1", 5204))
    response = client.put(
        f"/internal/lootpacks/pack-types/{pack_type_id}/rewards/{template_id}",
        json={"weight": 25},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 200
    assert response.json()["pool_invalidated"] is True
    assert upserts == [
        {"pack_type_id": pack_type_id, "reward_template_id": template_id, "weight": 25}
    ]
    assert pool_cache.invalidated == [pack_type_id]


def test_internal_upsert_mapping_unknown_pack_type(
    monkeypatch: pytest.MonkeyPatch,
    pool_cache: RecordingPoolCache,
) -> None:
    upserts = _install_catalog(monkeypatch, pack_type=None, template=object())

    client = TestClient(app, client=("127.0.0.1", 5205))
    response = client.put(
        f"/internal/lootpacks/pack-types/{uuid4()}/rewards/{uuid4()}",
        json={"weight": 25},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_PACK_NOT_FOUND"}}
    assert upserts == []
    assert pool_cache.invalidated == []


def test_internal_upsert_mapping_unknown_template(
    monkeypatch: pytest.MonkeyPatch,
    pool_cache: RecordingPoolCache,
) -> None:
    _install_catalog(monkeypatch, pack_type=object(), template=None)

    client = TestClient(app, client=("127.0.0.1", 5206))
    response = client.put(
        f"/internal/lootpacks/pack-types/{uuid4()}/rewards/{uuid4()}",
        json={"weight": 5},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_TEMPLATE_NOT_FOUND"}}


def test_internal_upsert_mapping_rejects_negative_weight(pool_cache: RecordingPoolCache) -> None:
    client = TestClient(app, client=("127.0.0.1", 5207))
    response = client.put(
        f"/internal/lootpacks/pack-types/{uuid4()}/rewards/{uuid4()}",
        json={"weight": -1},
        headers={"X-Internal-Token": INTERNAL_TOKEN},
    )

    assert response.status_code == 422
