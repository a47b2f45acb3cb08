"""Abstract base class for definition clients."""

from abc import ABC, abstractmethod
from collections.abc import Sequence


class DefinitionClient(ABC):
    """Base class for services that define vocabulary terms.

    Implementations must never raise from get_definitions: a term whose
    request fails resolves to the placeholder definition instead.
    """

    @property
    @abstractmethod
    def configured(self) -> bool:
        """Whether the client can actually request definitions."""
        pass

    @abstractmethod
    def get_definitions(self, terms: Sequence[str], language: str = "en") -> dict[str, str]:
        """Define every term.

        Args:
            terms: Vocabulary terms to define
            language: Two-letter language code of the terms ("en" or "fr")

        Returns:
            Mapping from each term to its definition or the placeholder
        """
        pass


class EnrichmentError(Exception):
    """Base exception for enrichment errors."""

    pass


class APIError(EnrichmentError):
    """API request failed."""

    pass
