from pathlib import Path
from typing import Iterator, List

import pandas as pd

from da_register_extraction.config import ExtractionSettings
from da_register_extraction.geometry import TextFragment
from da_register_extraction.orchestrator import ExtractionOrchestrator, add_unique_suffix
from da_register_extraction.schema import DevelopmentApplication

from conftest import page_fragments, record_fragments


class FakePreprocessor:
    def __init__(self, pages: List[List[TextFragment]], error: Exception | None = None):
        self.pages = pages
        self.error = error

    def iter_pages(self, file_path: Path) -> Iterator[List[TextFragment]]:
        if self.error is not None:
            raise self.error
        yield from self.pages


def _orchestrator(reference, pages, error=None) -> ExtractionOrchestrator:
    return ExtractionOrchestrator(
        reference=reference,
        settings=ExtractionSettings(info_url="https://example.org/da.pdf"),
        pdf_preprocessor=FakePreprocessor(pages, error),  # type: ignore[arg-type]
    )


def test_repeated_application_numbers_get_suffixes(reference) -> None:
    page1 = page_fragments(record_fragments(100), record_fragments(500))
    page2 = page_fragments(record_fragments(100, application_number="400/01/19"), record_fragments(500))
    results = _orchestrator(reference, [page1, page2]).process([Path("register.pdf")])

    assert len(results) == 1
    assert results[0].status == "ok"
    numbers = [record.application_number for record in results[0].records]
    assert numbers == ["345/12/19", "345/12/19 (1)", "400/01/19", "345/12/19 (2)"]
    assert all(record.info_url == "https://example.org/da.pdf" for record in results[0].records)


def test_non_pdf_is_skipped(reference) -> None:
    results = _orchestrator(reference, []).process([Path("notes.txt")])
    assert results[0].status == "skipped"
    assert results[0].records == []


def test_document_error_is_reported(reference) -> None:
    results = _orchestrator(reference, [], error=RuntimeError("broken xref")).process(
        [Path("broken.pdf"), Path("other.pdf")]
    )
    assert [result.status for result in results] == ["error", "error"]
    assert results[0].error == "broken xref"


def test_add_unique_suffix_leaves_new_numbers_alone() -> None:
    application = DevelopmentApplication(application_number="1/2/19", address="1 MAIN ROAD, KADINA")
    assert add_unique_suffix(application, []) is application


def test_dataframe_and_excel_output(reference, tmp_path) -> None:
    orchestrator = _orchestrator(reference, [page_fragments(record_fragments(100))])
    results = orchestrator.process([Path("register.pdf")])

    df = orchestrator.to_dataframe(results)
    assert list(df.columns) == [
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
    assert df.loc[0, "council_reference"] == "345/12/19"
    assert df.loc[0, "date_received"] == "2019-03-14"

    output = tmp_path / "out" / "applications.xlsx"
    orchestrator.to_excel(results, output)
    written = pd.read_excel(output, sheet_name="applications")
    assert written.loc[0, "address"] == "35 RAILWAY TERRACE, PASKEVILLE"
