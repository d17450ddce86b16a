"""
Tests for the HTTP surface: /api/chat, /health and the static UI mount.

The planner model is replaced with canned plans keyed by the user's text.
"""

import pytest
from fastapi.testclient import TestClient

from app import planner
from app.llm import LLMError, PlanParseError
from app.prompts import GREETING_REPLY
from core.models import Plan
from main import create_app

SAN_FERNANDO = [{"column": "City", "op": "contains", "value": "San Fernando"}]

CANNED_PLANS = {
    "show me listings in san fernando": {"intent": "list_listings", "filters": SAN_FERNANDO},
    "how many in san fernando": {"intent": "count_listings", "filters": SAN_FERNANDO},
    "average price in san fernando": {"intent": "average_price", "filters": SAN_FERNANDO},
    "price of #2": {"intent": "listing_details", "target": "index", "index": 2, "fields": ["price"]},
    "#1 and #7": {"intent": "listing_details", "indices": [1, 7], "fields": ["beds"]},
    "who is the agent": {"intent": "listing_details", "target": "last", "fields": ["agent"]},
    "everything on 123 main": {"intent": "full_profile", "target": "address", "address": "123 Main St"},
    "how are you": {"intent": "small_talk"},
}


@pytest.fixture
def fake_planner(monkeypatch):
    async def plan_for(messages):
        text = planner.last_user_text(messages)
        if text == "garbage":
            raise PlanParseError("plan_not_object: got list")
        if text == "rate limited":
            raise LLMError("Rate limit reached for gpt-4o-mini")
        if text == "boom":
            raise RuntimeError("unexpected")
        return Plan.model_validate(CANNED_PLANS[text])

    monkeypatch.setattr(planner, "plan_from_conversation", plan_for)


@pytest.fixture
def client(store, tmp_path, monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("LLM_API_KEY", raising=False)
    (tmp_path / "index.html").write_text("<html><body>Realtor GPT</body></html>", encoding="utf-8")
    return TestClient(create_app(store=store, static_path=str(tmp_path)))


def _ask(client, text, session_id=None, history=None):
    messages = list(history or []) + [{"role": "user", "content": text}]
    headers = {"X-Session-Id": session_id} if session_id else {}
    return client.post("/api/chat", json={"messages": messages}, headers=headers)


class TestSystemRoutes:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "listings": 3}

    def test_static_index(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "Realtor GPT" in resp.text


class TestChatErrors:
    """Error mapping for /api/chat."""

    def test_missing_api_key(self, client, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        resp = _ask(client, "hi")
        assert resp.status_code == 500
        assert resp.json() == {"error": "OPENAI_API_KEY is missing in .env"}

    def test_static_still_served_without_key(self, client, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert client.get("/").status_code == 200

    def test_malformed_json_body(self, client):
        resp = client.post("/api/chat", content=b"not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert "error" in resp.json()

    def test_messages_must_be_a_list(self, client):
        resp = client.post("/api/chat", json={"messages": "hi"})
        assert resp.status_code == 400

    def test_unparseable_plan(self, client, fake_planner):
        resp = _ask(client, "garbage")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to interpret query."}

    def test_upstream_error_message_is_passed_through(self, client, fake_planner):
        resp = _ask(client, "rate limited")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Rate limit reached for gpt-4o-mini"}

    def test_unexpected_error(self, client, fake_planner):
        resp = _ask(client, "boom")
        assert resp.status_code == 500
        assert resp.json() == {"error": "Server error while answering your question."}


class TestChatFlow:
    """Multi-turn conversations over the sample listings."""

    def test_greeting_skips_planner(self, client, monkeypatch):
        async def fail(messages):
            raise AssertionError("planner should not be called for a greeting")

        monkeypatch.setattr(planner, "plan_from_conversation", fail)
        resp = _ask(client, "Hello!")
        assert resp.status_code == 200
        assert resp.json() == {"reply": GREETING_REPLY}

    def test_list_then_position(self, client, fake_planner):
        resp = _ask(client, "show me listings in san fernando", session_id="s1")
        assert resp.json()["reply"] == (
            "Here are up to 2 matching listings:\n"
            "#1 8450 N Maclay Ave, San Fernando, CA, 91340\n"
            "#2 1021 Pico St, San Fernando, CA, 91340"
        )

        resp = _ask(client, "price of #2", session_id="s1")
        assert resp.status_code == 200
        assert resp.json()["reply"] == "#2 1021 Pico St, San Fernando, CA, 91340\nListPrice: Call for price"

    def test_pronoun_follows_last_selection(self, client, fake_planner):
        _ask(client, "show me listings in san fernando", session_id="s1")
        _ask(client, "price of #2", session_id="s1")
        resp = _ask(client, "who is the agent", session_id="s1")
        assert resp.json()["reply"] == "1021 Pico St, San Fernando, CA, 91340\nListing agent: N/A"

    def test_sessions_are_isolated(self, client, fake_planner):
        _ask(client, "show me listings in san fernando", session_id="s1")
        resp = _ask(client, "price of #2", session_id="s2")
        assert resp.status_code == 200
        assert "no list has been shown yet" in resp.json()["reply"]

    def test_requests_without_header_share_default_session(self, client, fake_planner):
        _ask(client, "show me listings in san fernando")
        resp = _ask(client, "price of #2")
        assert resp.json()["reply"].startswith("#2 1021 Pico St")

    def test_multiple_positions_with_one_missing(self, client, fake_planner):
        _ask(client, "show me listings in san fernando", session_id="s1")
        reply = _ask(client, "#1 and #7", session_id="s1").json()["reply"]
        assert reply == (
            "#1 8450 N Maclay Ave, San Fernando, CA, 91340\nBedroomsTotal: 4\n\n"
            "I don't have a listing #7 in the last list."
        )

    def test_pronoun_without_context(self, client, fake_planner):
        reply = _ask(client, "who is the agent", session_id="fresh").json()["reply"]
        assert reply.startswith("I'm not sure which property you mean by 'it'.")

    def test_count(self, client, fake_planner):
        reply = _ask(client, "how many in san fernando").json()["reply"]
        assert reply == "There are 2 listings that match your criteria."

    def test_average_price_skips_unpriced_rows(self, client, fake_planner):
        reply = _ask(client, "average price in san fernando").json()["reply"]
        assert reply == "For San Fernando, I found 1 listings with prices.\nAverage price: $875,000."

    def test_full_profile_by_address(self, client, fake_planner):
        reply = _ask(client, "everything on 123 main", session_id="s3").json()["reply"]
        assert reply.startswith("Full profile for 123 Main St, Gardena, CA, 90247:\n\nStreetNumber: 123")

    def test_small_talk(self, client, fake_planner):
        reply = _ask(client, "how are you").json()["reply"]
        assert "Realtor GPT" in reply
