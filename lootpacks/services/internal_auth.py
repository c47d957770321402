from __future__ import annotations

import ipaddress
import secrets
from dataclasses import dataclass
from functools import lru_cache

from fastapi import Request

INTERNAL_TOKEN_HEADER = "X-Internal-Token"


@dataclass(frozen=True, slots=True)
class InternalAccessDecision:
    """Outcome of checking a pool-admin request against the allowlist and token."""

    allowed: bool
    client_ip: str | None
    reason: str | None = None


@lru_cache(maxsize=32)
def _parse_allowlist(
    allowlist: str,
) -> tuple[ipaddress.IPv4Network | ipaddress.IPv6Network, ...]:
    networks: list[ipaddress.IPv4Network | ipaddress.IPv6Network] = []
    for raw_entry in allowlist.split(","):
        entry = raw_entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            continue
    return tuple(networks)


def _parse_ip(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    try:
        return str(ipaddress.ip_address(value.strip()))
    except ValueError:
        return None


def _ip_in(client_ip: str | None, allowlist: str) -> bool:
    if client_ip is None:
        return False
    parsed_ip = ipaddress.ip_address(client_ip)
    return any(parsed_ip in network for network in _parse_allowlist(allowlist))


def extract_client_ip(request: Request, *, trusted_proxies: str = "") -> str | None:
    """Peer address, or the first X-Forwarded-For hop when the peer is a trusted proxy."""
    client_host = _parse_ip(request.client.host if request.client is not None else None)
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for and _ip_in(client_host, trusted_proxies):
        return _parse_ip(forwarded_for.split(",", maxsplit=1)[0])
    return client_host


def evaluate_internal_access(
    request: Request,
    *,
    expected_token: str,
    allowlist: str,
    trusted_proxies: str = "",
) -> InternalAccessDecision:
    client_ip = extract_client_ip(request, trusted_proxies=trusted_proxies)
    if not _ip_in(client_ip, allowlist):
        return InternalAccessDecision(allowed=False, client_ip=client_ip, reason="ip_not_allowed")

    received_token = request.headers.get(INTERNAL_TOKEN_HEADER)
    if not expected_token:
        return InternalAccessDecision(allowed=False, client_ip=client_ip, reason="token_not_configured")
    if not received_token:
        return InternalAccessDecision(allowed=False, client_ip=client_ip, reason="missing_token")
    if not secrets.compare_digest(expected_token, received_token):
        return InternalAccessDecision(allowed=False, client_ip=client_ip, reason="invalid_token")

    return InternalAccessDecision(allowed=True, client_ip=client_ip)
