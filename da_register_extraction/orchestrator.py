from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Literal, Sequence

import pandas as pd

from .config import ExtractionSettings
from .parser import ApplicationParser
from .preprocess import PDFPreprocessor
from .reference import ReferenceData
from .schema import DevelopmentApplication
from .segmenter import segment_page

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    document: Path
    status: Literal["ok", "error", "skipped"]
    records: List[DevelopmentApplication] = field(default_factory=list)
    error: str | None = None


def add_unique_suffix(
    application: DevelopmentApplication, existing: Iterable[DevelopmentApplication]
) -> DevelopmentApplication:
    """
    Suffix a repeated application number with " (1)", " (2)", ...

    A number seen twice in one document usually means a digit was misread, so
    both records are kept.
    """
    taken = {other.application_number for other in existing}
    number = application.application_number
    candidate = number
    suffix = 0
    while candidate in taken:
        suffix += 1
        candidate = f"{number} ({suffix})"
    if candidate == number:
        return application
    return application.model_copy(update={"application_number": candidate})


class ExtractionOrchestrator:
    """
    Coordinates per-document, per-page extraction of development applications.
    """

    def __init__(
        self,
        reference: ReferenceData,
        settings: ExtractionSettings | None = None,
        pdf_preprocessor: PDFPreprocessor | None = None,
        parser: ApplicationParser | None = None,
    ):
        self.settings = settings or ExtractionSettings()
        self.pdf_preprocessor = pdf_preprocessor or PDFPreprocessor(max_pages=self.settings.max_pages)
        self.parser = parser or ApplicationParser(reference, self.settings)

    def parse_document(self, file_path: Path, info_url: str) -> List[DevelopmentApplication]:
        applications: List[DevelopmentApplication] = []
        # Pages are independent; each page's fragments are dropped before the next is read.
        for page_number, fragments in enumerate(self.pdf_preprocessor.iter_pages(file_path), start=1):
            groups = segment_page(fragments)
            logger.info(
                "Page %d of %s: %d fragment(s), %d application(s)",
                page_number,
                file_path.name,
                len(fragments),
                len(groups),
            )
            for group in groups:
                application = self.parser.parse(group, info_url)
                if application is not None:
                    applications.append(add_unique_suffix(application, applications))
        return applications

    def process(self, files: Sequence[Path]) -> List[DocumentResult]:
        results: List[DocumentResult] = []
        for file_path in files:
            path = Path(file_path)
            if path.suffix.lower() != ".pdf":
                logger.warning("Skipping %s: unsupported file type %s", path, path.suffix)
                results.append(DocumentResult(document=path, status="skipped", error="Unsupported file type"))
                continue
            info_url = self.settings.info_url or path.resolve().as_uri()
            try:
                logger.info("Parsing document %s", path)
                records = self.parse_document(path, info_url)
            except Exception as exc:
                logger.exception("Parsing failed for %s", path.name)
                results.append(DocumentResult(document=path, status="error", error=str(exc)))
                continue
            logger.info("Parsed %d development application(s) from %s", len(records), path.name)
            results.append(DocumentResult(document=path, status="ok", records=records))
        return results

    def to_dataframe(self, results: Sequence[DocumentResult]) -> pd.DataFrame:
        """
        Flatten results into one row per application.

        Columns: document_name, council_reference, address, description,
        info_url, comment_url, date_scraped, date_received, legal_description
        """
        rows: List[dict[str, Any]] = []
        for res in results:
            for record in res.records:
                row: dict[str, Any] = {"document_name": res.document.name}
                row.update(record.to_row())
                row["council_reference"] = row.pop("application_number")
                rows.append(row)
        columns = [
            "document_name",
            "council_reference",
            "address",
            "description",
            "info_url",
            "comment_url",
            "date_scraped",
            "date_received",
            "legal_description",
        ]
        return pd.DataFrame(rows, columns=columns)

    def to_excel(self, results: Sequence[DocumentResult], output_path: Path) -> None:
        """
        Write results to an Excel file with sheet 'applications'.
        """
        df = self.to_dataframe(results)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing %d application(s) to %s", len(df), output_path)
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="applications", index=False)
