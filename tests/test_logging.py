from __future__ import annotations

from uuid import uuid4

import structlog

from lootpacks.core.logging import SERVICE_NAME, _add_service_name, lootpack_log_context


def test_lootpack_log_context_binds_user_and_pack_type_only_inside_block() -> None:
    structlog.contextvars.clear_contextvars()
    pack_type_id = uuid4()

    with lootpack_log_context(user_id="user-1", pack_type_id=pack_type_id):
        event = structlog.contextvars.merge_contextvars(None, "info", {"event": "lootpack_opened"})
        assert event == {
            "event": "lootpack_opened",
            "user_id": "user-1",
            "pack_type_id": str(pack_type_id),
        }

    assert structlog.contextvars.get_contextvars() == {}


def test_lootpack_log_context_without_pack_type_binds_user_only() -> None:
    structlog.contextvars.clear_contextvars()

    with lootpack_log_context(user_id="user-2"):
        assert structlog.contextvars.get_contextvars() == {"user_id": "user-2"}


def test_service_name_processor_keeps_explicit_service() -> None:
    assert _add_service_name(None, "info", {"event": "x"})["service"] == SERVICE_NAME
    assert _add_service_name(None, "info", {"event": "x", "service": "other"})["service"] == "other"
