"""Configuration object for a sync run."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from common.constants import DEFAULT_STORAGE_FOLDER
from common.env import env
from render.template import DEFAULT_TEMPLATE, load_template


class MergeStrategy(str, Enum):
    """How an existing document is combined with new highlights.

    RERENDER regenerates the document from the template and re-inserts the
    reader's notes. APPEND only adds highlights that are missing. One
    strategy applies to every document of a run.
    """

    RERENDER = "rerender"
    APPEND = "append"


@dataclass
class SyncSettings:
    """Settings for one run over the library.

    Attributes:
        db_path: KoboReader.sqlite to read (None means not selected)
        storage_folder: Folder receiving one markdown document per book
        template: Template source used to render documents
        sort_by_chapter_progress: Order highlights by progress instead of date
        import_all_books: Also write documents for books without highlights
        ollama_model: Model for vocabulary definitions (empty disables them)
        ollama_base_url: Ollama server URL
        definition_workers: Concurrent definition requests per book
        strategy: Merge strategy for existing documents
        keep_orphans: Keep notes of chapters that disappeared upstream
    """

    db_path: Path | None = None
    storage_folder: Path = DEFAULT_STORAGE_FOLDER
    template: str = DEFAULT_TEMPLATE
    sort_by_chapter_progress: bool = False
    import_all_books: bool = False
    ollama_model: str = ""
    ollama_base_url: str = "http://localhost:11434"
    definition_workers: int = 8
    strategy: MergeStrategy | str = MergeStrategy.RERENDER
    keep_orphans: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        if isinstance(self.strategy, str):
            try:
                self.strategy = MergeStrategy(self.strategy.lower())
            except ValueError as e:
                raise ValueError(
                    f"Unsupported merge strategy: {self.strategy}. "
                    f"Must be one of: {', '.join(s.value for s in MergeStrategy)}"
                ) from e

        if isinstance(self.db_path, str):
            self.db_path = Path(self.db_path)
        if isinstance(self.storage_folder, str):
            self.storage_folder = Path(self.storage_folder)
        if self.definition_workers < 1:
            raise ValueError("definition_workers must be at least 1")

    @classmethod
    def from_env(cls) -> "SyncSettings":
        """Build settings from environment variables (and .env)."""
        return cls(
            db_path=env.kobo_db_path(),
            storage_folder=env.storage_folder(),
            template=load_template(env.template_path()),
            sort_by_chapter_progress=env.sort_by_chapter_progress(),
            import_all_books=env.import_all_books(),
            ollama_model=env.ollama_model(),
            ollama_base_url=env.ollama_base_url(),
            definition_workers=env.definition_workers(),
            strategy=env.merge_strategy(),
            keep_orphans=env.keep_orphaned_notes(),
        )
