"""Write one document per book and keep it up to date across runs."""

import random
from dataclasses import dataclass, field
from enum import Enum

from common.logger import get_logger
from enrich.clients.base import DefinitionClient
from enrich.language import detect_language
from extract.highlight_service import HighlightService
from extract.models import BookDetails, ChapterMap, unique_highlights, vocabulary_terms
from merge.definitions import merge_definitions, missing_terms, read_definition_cache
from merge.legacy import merge_append_only, pending_vocabulary
from merge.user_content import extract_user_content, reinsert_user_content
from render.template import TEMPLATE_ERROR_MESSAGE, render_document

from .settings import MergeStrategy, SyncSettings
from .storage import DocumentStorage

logger = get_logger(__name__)


class SyncOutcome(str, Enum):
    """What happened to a book's document."""

    CREATED = "created"
    UPDATED = "updated"


@dataclass
class SyncReport:
    """Summary of a run."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    definitions_requested: int = 0
    template_errors: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.created) + len(self.updated)


class LibrarySync:
    """Orchestrate the per-book merge.

    Books are processed one after another; nothing but the settings and
    the definition client is shared between them.
    """

    def __init__(
        self,
        settings: SyncSettings,
        storage: DocumentStorage | None = None,
        definition_client: DefinitionClient | None = None,
        rng: random.Random | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            settings: Run configuration
            storage: Document storage (defaults to settings.storage_folder)
            definition_client: Client for vocabulary definitions, None to skip fetching
            rng: Random generator for language detection sampling
        """
        self.settings = settings
        self.storage = storage or DocumentStorage(settings.storage_folder)
        self.definition_client = definition_client
        self.rng = rng
        self.report = SyncReport()

    def run(self, service: HighlightService) -> SyncReport:
        """Sync every book of the source database.

        Args:
            service: Highlight service over an open Kobo database

        Returns:
            SyncReport for the run

        Raises:
            SourceError: If the source database cannot be read
            StorageError: If a document cannot be read or written
        """
        self.report = SyncReport()
        content = service.get_all_highlight(self.settings.sort_by_chapter_progress)

        if self.settings.import_all_books:
            for book_title in service.get_all_books():
                content.setdefault(book_title, service.create_empty_content_map())

        logger.info(f"Found [bold]{len(content)}[/bold] book(s) to write")

        for i, (book_title, chapters) in enumerate(content.items()):
            logger.info(f"[{i + 1}/{len(content)}] {book_title}")
            details = service.get_book_details(book_title)
            self.sync_book(book_title, chapters, details)

        return self.report

    def sync_book(self, book_title: str, chapters: ChapterMap, details: BookDetails) -> SyncOutcome:
        """Create or update the document of one book.

        The steps are: read cached definitions from the existing document,
        detect the vocabulary language, fetch definitions for uncached terms,
        render, merge with the existing document, write once.

        If the template fails on a book that already has a document, the
        document is written back unchanged so nothing in it is lost.
        """
        chapters = unique_highlights(chapters)
        path = self.storage.path_for(book_title)
        existing = self.storage.read(path) if self.storage.exists(path) else None

        definitions = read_definition_cache(existing)
        terms = vocabulary_terms(chapters)
        language = detect_language(terms, rng=self.rng)

        if self.settings.strategy is MergeStrategy.APPEND:
            # Lines already written are never updated, only new ones need definitions
            terms = pending_vocabulary(existing, chapters)
        definitions = self._fetch_missing(terms, definitions, language)

        if self.settings.strategy is MergeStrategy.APPEND:
            base = existing if existing is not None else f"# {details.title}"
            content = merge_append_only(base, chapters, definitions)
        else:
            content = self._render(book_title, chapters, details, definitions, language, existing)

        self.storage.write(path, content)

        if existing is None:
            outcome = SyncOutcome.CREATED
            self.report.created.append(book_title)
        else:
            outcome = SyncOutcome.UPDATED
            self.report.updated.append(book_title)
        logger.debug(f"{outcome.value.capitalize()} {path}")

        return outcome

    def _fetch_missing(
        self, terms: list[str], definitions: dict[str, str], language: str
    ) -> dict[str, str]:
        missing = missing_terms(terms, definitions)
        if not missing:
            return definitions
        if self.definition_client is None or not self.definition_client.configured:
            logger.debug(f"{len(missing)} term(s) without definition, no model configured")
            return definitions

        fetched = self.definition_client.get_definitions(missing, language)
        self.report.definitions_requested += len(fetched)
        return merge_definitions(definitions, fetched)

    def _render(
        self,
        book_title: str,
        chapters: ChapterMap,
        details: BookDetails,
        definitions: dict[str, str],
        language: str,
        existing: str | None,
    ) -> str:
        rendered = render_document(self.settings.template, chapters, details, definitions, language)

        if rendered == TEMPLATE_ERROR_MESSAGE:
            self.report.template_errors.append(book_title)
            if existing is not None:
                logger.warning(f"Keeping '{book_title}' unchanged until the template renders")
                return existing
            return rendered

        if existing is None:
            return rendered

        user_content = extract_user_content(existing)
        return reinsert_user_content(rendered, user_content, keep_orphans=self.settings.keep_orphans)
