"""Tests for spendwise.integrations.gemini with requests patched out."""

from decimal import Decimal
from typing import Any

import pytest
import requests

from spendwise.domain.models import Category, Expense, IsoDate, Money
from spendwise.errors import AdvisorError, MissingApiKeyError, RateLimitError
from spendwise.integrations import gemini
from spendwise.integrations.gemini import (
    DEFAULT_MODEL,
    chat_with_advisor,
    discover_model,
    extract_text,
    generate_insights,
    select_model,
)

EXPENSES = [
    Expense(id="1", amount=Money(Decimal(120)), category=Category.FOOD, date=IsoDate("2024-03-01"), note="dinner"),
]


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None) -> None:
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no json")
        return self._body


def reply(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def model(name: str, methods: list[str] | None = None) -> dict[str, Any]:
    return {"name": f"models/{name}", "supportedGenerationMethods": methods or ["generateContent"]}


class TestSelectModel:
    """Tests for select_model."""

    def test_prefers_flash(self) -> None:
        models = [model("gemini-1.5-pro"), model("gemini-1.5-flash-002")]

        assert select_model(models) == "gemini-1.5-flash-002"

    def test_keeps_listing_order_without_flash(self) -> None:
        models = [model("gemini-pro"), model("gemini-1.0-pro")]

        assert select_model(models) == "gemini-pro"

    def test_skips_models_without_generate_content(self) -> None:
        models = [model("gemini-1.5-flash", ["embedContent"]), model("gemini-1.5-pro")]

        assert select_model(models) == "gemini-1.5-pro"

    def test_skips_unknown_families(self) -> None:
        assert select_model([model("text-bison-001")]) is None


class TestDiscoverModel:
    """Tests for discover_model fallbacks."""

    def test_uses_listing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            gemini.requests, "get", lambda url, params: FakeResponse(200, {"models": [model("gemini-1.5-flash")]})
        )

        assert discover_model("key") == "gemini-1.5-flash"

    def test_http_error_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "get", lambda url, params: FakeResponse(403, {}))

        assert discover_model("key") == DEFAULT_MODEL

    def test_transport_error_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(*args: Any, **kwargs: Any) -> None:
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(gemini.requests, "get", broken)

        assert discover_model("key") == DEFAULT_MODEL

    def test_empty_listing_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "get", lambda url, params: FakeResponse(200, {}))

        assert discover_model("key") == DEFAULT_MODEL

    def test_unexpected_listing_shape_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "get", lambda url, params: FakeResponse(200, ["not", "a", "dict"]))

        assert discover_model("key") == DEFAULT_MODEL


class TestChat:
    """Tests for chat_with_advisor and generate_insights."""

    @pytest.fixture(autouse=True)
    def fixed_model(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini, "discover_model", lambda api_key: "gemini-1.5-flash")

    def test_missing_key(self) -> None:
        with pytest.raises(MissingApiKeyError):
            chat_with_advisor("hi", EXPENSES, "")

    def test_returns_reply_text(self, monkeypatch: pytest.MonkeyPatch) -> None:
        sent: dict[str, Any] = {}

        def fake_post(url: str, **kwargs: Any) -> FakeResponse:
            sent["url"] = url
            sent.update(kwargs)
            return FakeResponse(200, reply("You spent 120 on food 🍕"))

        monkeypatch.setattr(gemini.requests, "post", fake_post)

        answer = chat_with_advisor("How much on food?", EXPENSES, "secret")

        assert answer == "You spent 120 on food 🍕"
        assert sent["url"].endswith("/models/gemini-1.5-flash:generateContent")
        assert sent["params"] == {"key": "secret"}
        prompt = sent["json"]["contents"][0]["parts"][0]["text"]
        assert "2024-03-01: 120 (Food) - dinner" in prompt
        assert prompt.endswith("User Question: How much on food?")

    def test_rate_limit_is_distinct(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "post", lambda url, **kwargs: FakeResponse(429, {"error": {}}))

        with pytest.raises(RateLimitError, match="Usage limit exceeded"):
            chat_with_advisor("hi", EXPENSES, "secret")

    def test_provider_error_message(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            gemini.requests,
            "post",
            lambda url, **kwargs: FakeResponse(400, {"error": {"message": "API key not valid"}}),
        )

        with pytest.raises(AdvisorError, match="API key not valid") as excinfo:
            chat_with_advisor("hi", EXPENSES, "bad")
        assert not isinstance(excinfo.value, RateLimitError)

    def test_transport_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken(*args: Any, **kwargs: Any) -> None:
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(gemini.requests, "post", broken)

        with pytest.raises(AdvisorError, match="Failed to communicate"):
            chat_with_advisor("hi", EXPENSES, "secret")

    def test_unreadable_success_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "post", lambda url, **kwargs: FakeResponse(200, None))

        with pytest.raises(AdvisorError, match="unreadable"):
            chat_with_advisor("hi", EXPENSES, "secret")

    def test_string_error_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "post", lambda url, **kwargs: FakeResponse(400, {"error": "bad request"}))

        with pytest.raises(AdvisorError, match="bad request"):
            chat_with_advisor("hi", EXPENSES, "secret")

    def test_non_json_error_body(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "post", lambda url, **kwargs: FakeResponse(500, None))

        with pytest.raises(AdvisorError, match="Failed to fetch response"):
            generate_insights(EXPENSES, "secret")


    def test_insights(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(gemini.requests, "post", lambda url, **kwargs: FakeResponse(200, reply("1. Cook more")))

        assert generate_insights(EXPENSES, "secret") == "1. Cook more"

    def test_insights_missing_key(self) -> None:
        with pytest.raises(MissingApiKeyError):
            generate_insights(EXPENSES, "")


class TestExtractText:
    """Tests for extract_text."""

    def test_no_candidates(self) -> None:
        with pytest.raises(AdvisorError):
            extract_text({"candidates": []})
