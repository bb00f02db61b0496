from __future__ import annotations

from listing_gateway.agents import listing_agent_display, pick_listing_agent


def test_pick_prefers_listing_role():
    agents = [
        {"name": "Buyer Side", "role": "Buyer Agent"},
        {"name": "Lister", "roles": ["Co-Agent", "Listing Agent"]},
    ]
    assert pick_listing_agent(agents)["name"] == "Lister"


def test_pick_matches_seller_in_agent_type():
    agents = [{"name": "A"}, {"name": "B", "agentType": "SELLER_AGENT"}]
    assert pick_listing_agent(agents)["name"] == "B"


def test_pick_falls_back_to_first_agent():
    agents = [{"name": "First"}, {"name": "Second", "type": "buyer"}]
    assert pick_listing_agent(agents)["name"] == "First"


def test_pick_without_agents():
    assert pick_listing_agent([]) is None
    assert pick_listing_agent(None) is None


def test_display_uses_office_brokerage_fallback():
    listing = {
        "agents": [{"name": "Dana", "phones": ["617-555-0100"], "photo": {"small": "s.jpg"}}],
        "office": {"brokerageName": "Harbor Realty"},
    }

    display = listing_agent_display(listing)

    assert display == {
        "agent_name": "Dana",
        "agent_phone": "617-555-0100",
        "agent_email": None,
        "agent_photo": "s.jpg",
        "agent_website": None,
        "brokerage_name": "Harbor Realty",
        "has_primary_contact": True,
    }


def test_display_without_contact():
    display = listing_agent_display({"agents": [{"name": "No Contact", "brokerage": {"name": "B"}}]})

    assert display["brokerage_name"] == "B"
    assert display["has_primary_contact"] is False


def test_display_for_listing_without_agents():
    display = listing_agent_display({})
    assert display["agent_name"] is None
    assert display["has_primary_contact"] is False
