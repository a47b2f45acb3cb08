"""Render a book's highlights into its canonical markdown document.

Templates are Jinja2. The context available to a template is:

    chapters      list of (chapter name, list of Highlight) pairs
    book_details  BookDetails of the book
    definitions   mapping of vocabulary term -> definition
    language      "en" or "fr"
    ReadStatus    the ReadStatus enum, for comparisons
    placeholder   the placeholder definition ("...")

Vocabulary lines must keep the `- term ::: definition` shape so that
definitions can be read back on the next run.
"""

from pathlib import Path

from jinja2 import Environment, TemplateError

from common.constants import DEFINITION_PLACEHOLDER
from common.logger import get_logger
from extract.models import BookDetails, ChapterMap
from extract.types import ReadStatus

logger = get_logger(__name__)

TEMPLATE_ERROR_MESSAGE = "Error: Template rendering failed. Check the log for details."

DEFAULT_TEMPLATE = """\
---
cards-deck: {{ "Vocabulaire" if language == "fr" else "Vocabulary" }}
---

{% for chapter_name, highlights in chapters %}
## {{ chapter_name }}

%% kobo-highlights-start %%
{% for highlight in highlights %}
{% if highlight.is_vocabulary %}
- {{ highlight.text }} ::: {{ definitions.get(highlight.text, placeholder) }}
{% else %}
> Quote : {{ highlight.text }}
{% endif %}

{% if highlight.note %}
**Note:** {{ highlight.note }}

{% endif %}
{% endfor %}
%% kobo-highlights-end %%

{% endfor %}
"""

_environment = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)


def load_template(template_path: Path | None) -> str:
    """Read a template file, falling back to the default template.

    Args:
        template_path: Template file, or None for the default

    Returns:
        Template source
    """
    if template_path is None or not str(template_path).strip():
        return DEFAULT_TEMPLATE

    try:
        return Path(template_path).read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Failed to read template '{template_path}', using default: {e}")
        return DEFAULT_TEMPLATE


def render_document(
    template: str,
    chapters: ChapterMap,
    book_details: BookDetails,
    definitions: dict[str, str],
    language: str = "en",
) -> str:
    """Render the canonical document for one book.

    Returns:
        Rendered document with surrounding whitespace stripped, or
        TEMPLATE_ERROR_MESSAGE when the template cannot be parsed or rendered
    """
    try:
        rendered = _environment.from_string(template).render(
            chapters=list(chapters.items()),
            book_details=book_details,
            definitions=definitions,
            language=language,
            ReadStatus=ReadStatus,
            placeholder=DEFINITION_PLACEHOLDER,
        )
    except TemplateError as e:
        logger.error(f"Template rendering failed for '{book_details.title}': {e}")
        return TEMPLATE_ERROR_MESSAGE

    return rendered.strip()
