"""Ollama client for vocabulary definitions."""

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

import requests

from common.constants import DEFINITION_PLACEHOLDER
from common.logger import get_logger

from .base import APIError, DefinitionClient

logger = get_logger(__name__)

PROMPTS = {
    "en": (
        'Provide only the definition of "{term}". Maximum 2 short sentences. '
        'IMPORTANT: NEVER repeat the word "{term}" in your response. '
        "Start directly with the definition without mentioning the word."
    ),
    "fr": (
        'Donne uniquement la définition du mot "{term}" en français. '
        "Maximum 2 phrases courtes. "
        'IMPORTANT : Ne répète JAMAIS le mot "{term}" dans ta réponse. '
        "Commence directement par la définition sans mentionner le mot."
    ),
}


class OllamaClient(DefinitionClient):
    """Client for a local Ollama server.

    Each term is one non-streaming request to /api/generate. Requests for
    a book's terms run in parallel on a thread pool; a local server has no
    rate limit to respect.

    API Documentation: https://github.com/ollama/ollama/blob/main/docs/api.md
    """

    DEFAULT_BASE_URL = "http://localhost:11434"

    def __init__(
        self,
        model: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 120,
        max_workers: int = 8,
    ):
        """Initialize Ollama client.

        Args:
            model: Model name (e.g. "llama3.2"); empty disables definitions
            base_url: Ollama server URL
            timeout: Per-request timeout in seconds
            max_workers: Maximum number of concurrent requests
        """
        self.model = (model or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_workers = max(1, max_workers)
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @property
    def configured(self) -> bool:
        return bool(self.model)

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/api/generate"

    def request_definition(self, term: str, language: str = "en") -> str:
        """Request a definition for one term.

        Args:
            term: Vocabulary term
            language: "en" or "fr"; anything else uses the English prompt

        Returns:
            Definition text

        Raises:
            APIError: If the request fails or the response has no definition
        """
        prompt = PROMPTS.get(language, PROMPTS["en"]).format(term=term)

        try:
            response = self.session.post(
                self.generate_url,
                json={"model": self.model, "prompt": prompt, "stream": False},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise APIError(f"Ollama request failed: {e}") from e
        except ValueError as e:
            raise APIError(f"Invalid JSON from Ollama: {e}") from e

        definition = data.get("response") if isinstance(data, dict) else None
        if not isinstance(definition, str) or not definition.strip():
            raise APIError("Ollama returned an empty definition")

        # Definitions are stored on one `- term ::: definition` line
        return " ".join(definition.split())

    def get_definition(self, term: str, language: str = "en") -> str:
        """Define one term, falling back to the placeholder on any failure."""
        if not self.configured:
            return DEFINITION_PLACEHOLDER

        try:
            return self.request_definition(term, language)
        except APIError as e:
            logger.warning(f"No definition for '{term}': {e}")
            return DEFINITION_PLACEHOLDER

    def get_definitions(self, terms: Sequence[str], language: str = "en") -> dict[str, str]:
        """Define all terms concurrently.

        Every request is awaited before returning; a failed term resolves to
        the placeholder without affecting the others.
        """
        unique_terms = list(dict.fromkeys(terms))
        if not unique_terms:
            return {}

        if not self.configured:
            return {term: DEFINITION_PLACEHOLDER for term in unique_terms}

        language_name = "French" if language == "fr" else "English"
        logger.info(
            f"Fetching {language_name} definitions for [bold]{len(unique_terms)}[/bold] "
            f"term(s) with {self.model}"
        )

        results: dict[str, str] = {}
        workers = min(self.max_workers, len(unique_terms))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(self.get_definition, term, language): term for term in unique_terms
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        failed = sum(1 for value in results.values() if value == DEFINITION_PLACEHOLDER)
        if failed:
            logger.warning(f"{failed}/{len(unique_terms)} definition(s) fell back to placeholder")

        # Keep the caller's term order
        return {term: results[term] for term in unique_terms}

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
