"""Google Gemini API interactions for the spending assistant.

The API key is always passed in by the caller; nothing here reads config.
"""

import logging
from collections.abc import Sequence
from typing import Any

import requests

from spendwise.domain.advisor import build_advisor_prompt, build_insights_prompt
from spendwise.domain.models import Expense
from spendwise.errors import AdvisorError, MissingApiKeyError, RateLimitError

logger = logging.getLogger(__name__)

API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash"
MODEL_FAMILIES = ("gemini-1.5", "gemini-pro", "gemini-1.0")


def select_model(models: list[dict[str, Any]]) -> str | None:
    """Pick the preferred text-generation model from a models listing.

    Only models supporting generateContent from the known families are
    considered. "flash" models win over the rest; otherwise listing order
    is kept.

    Returns:
        Model id without the "models/" prefix, or None if nothing qualifies.
    """
    candidates = [
        model
        for model in models
        if "generateContent" in (model.get("supportedGenerationMethods") or [])
        and any(family in model.get("name", "") for family in MODEL_FAMILIES)
    ]
    if not candidates:
        return None
    candidates.sort(key=lambda model: "flash" not in model["name"].lower())
    return candidates[0]["name"].removeprefix("models/")


def discover_model(api_key: str) -> str:
    """Find a usable model for this key, falling back to DEFAULT_MODEL.

    Never raises: a failed listing must not abort the user's request.
    """
    try:
        response = requests.get(f"{API_BASE_URL}/models", params={"key": api_key})
        if not response.ok:
            return DEFAULT_MODEL
        model = select_model(response.json().get("models") or [])
    except (requests.RequestException, ValueError, AttributeError) as e:
        logger.warning("Failed to fetch models list, using default: %s", e)
        return DEFAULT_MODEL
    return model or DEFAULT_MODEL


def extract_text(data: dict[str, Any]) -> str:
    """Pull the reply text out of a generateContent response.

    Raises:
        AdvisorError: If the response has no candidate text.
    """
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise AdvisorError("Failed to fetch response") from e


def _error_message(response: requests.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message")
    if isinstance(error, str):
        return error
    return None


def generate_content(prompt: str, api_key: str) -> str:
    """Send a single-turn prompt and return the reply text.

    Raises:
        MissingApiKeyError: If api_key is empty.
        RateLimitError: If the provider answers HTTP 429.
        AdvisorError: For any other failure.
    """
    if not api_key:
        raise MissingApiKeyError()

    model = discover_model(api_key)
    logger.info("Using AI model: %s", model)

    body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
    try:
        response = requests.post(
            f"{API_BASE_URL}/models/{model}:generateContent",
            params={"key": api_key},
            headers={"Content-Type": "application/json"},
            json=body,
        )
    except requests.RequestException as e:
        raise AdvisorError(f"Failed to communicate with Advisor: {e}") from e

    if response.status_code == 429:
        raise RateLimitError()
    if not response.ok:
        raise AdvisorError(_error_message(response) or "Failed to fetch response")

    try:
        data = response.json()
    except ValueError as e:
        raise AdvisorError("Advisor returned an unreadable response") from e
    return extract_text(data)


def chat_with_advisor(message: str, expenses: Sequence[Expense], api_key: str) -> str:
    """Answer a free-text question about the user's recent spending."""
    if not api_key:
        raise MissingApiKeyError()
    return generate_content(build_advisor_prompt(message, expenses), api_key)


def generate_insights(expenses: Sequence[Expense], api_key: str) -> str:
    """Ask for three short saving tips based on the user's spending."""
    if not api_key:
        raise MissingApiKeyError()
    return generate_content(build_insights_prompt(expenses), api_key)
