from __future__ import annotations

from dataclasses import dataclass

from .addresses import DEFAULT_SENTINEL

DEFAULT_COMMENT_URL = "mailto:admin@wrc.sa.gov.au"
DEFAULT_MAX_PAGES = 500


@dataclass
class ExtractionSettings:
    """Run-wide options handed from the CLI to the orchestrator."""

    comment_url: str = DEFAULT_COMMENT_URL
    info_url: str | None = None  # Defaults to the document's own location
    sentinel: str = DEFAULT_SENTINEL
    max_pages: int | None = DEFAULT_MAX_PAGES
