"""Helpers for reading agent contact details out of a listing body.

Used by ``GatewayClient.get_listing_agent``; also importable on their own
for callers that already hold a listing body.
"""

from __future__ import annotations

from typing import Any

_LISTING_ROLE_MARKERS = ("list", "seller")


def _is_listing_role(agent: dict[str, Any]) -> bool:
    parts = [agent.get("role"), agent.get("type"), agent.get("agentType"), *(agent.get("roles") or [])]
    role_text = " ".join(str(p) for p in parts if p).lower()
    return any(marker in role_text for marker in _LISTING_ROLE_MARKERS)


def pick_listing_agent(agents: list[dict[str, Any]] | None) -> dict[str, Any] | None:
    """Pick the listing agent from a listing's ``agents`` array.

    MLS feeds mark roles inconsistently, so the first agent whose role
    text mentions listing/seller wins; otherwise the first agent; ``None``
    when there are no agents.
    """
    agents = agents or []
    for agent in agents:
        if _is_listing_role(agent):
            return agent
    return agents[0] if agents else None


def listing_agent_display(listing: dict[str, Any]) -> dict[str, Any]:
    agent = pick_listing_agent(listing.get("agents")) or {}
    phones = agent.get("phones") or []
    photo = agent.get("photo") or {}
    brokerage = agent.get("brokerage") or {}
    office = listing.get("office") or {}

    agent_phone = phones[0] if phones else None
    agent_email = agent.get("email") or None
    return {
        "agent_name": agent.get("name") or None,
        "agent_phone": agent_phone or None,
        "agent_email": agent_email,
        "agent_photo": photo.get("small") or None,
        "agent_website": agent.get("website") or None,
        "brokerage_name": brokerage.get("name") or office.get("brokerageName") or None,
        "has_primary_contact": bool(agent_email or agent_phone),
    }
