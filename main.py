import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
import typer

from da_register_extraction.config import DEFAULT_COMMENT_URL, DEFAULT_MAX_PAGES, ExtractionSettings
from da_register_extraction.orchestrator import ExtractionOrchestrator
from da_register_extraction.reference import load_reference_data

load_dotenv()


app = typer.Typer(add_completion=False)


@app.command()
def process(
    files: List[Path],
    reference_dir: Path = typer.Option(
        Path("."),
        "--reference-dir",
        "-r",
        envvar="DA_REFERENCE_DIR",
        help="Directory holding streetnames.txt, streetsuffixes.txt, suburbnames.txt and hundrednames.txt",
    ),
    output: Path = typer.Option(
        Path("applications.xlsx"),
        "--output",
        "-o",
        envvar="DA_OUTPUT",
        help="Output Excel file path",
    ),
    info_url: Optional[str] = typer.Option(
        None,
        "--info-url",
        help="Information URL recorded against each application (defaults to the file's URI)",
    ),
    comment_url: str = typer.Option(
        DEFAULT_COMMENT_URL,
        "--comment-url",
        envvar="DA_COMMENT_URL",
        help="Comment URL recorded against each application",
    ),
    max_pages: int = typer.Option(
        DEFAULT_MAX_PAGES,
        "--max-pages",
        help="Stop reading a document after this many pages",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="DA_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """
    Extract development applications from register PDFs into a spreadsheet.
    """
    log_path = output.with_suffix(".log")
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_path),
        ],
    )
    logger = logging.getLogger(__name__)
    logger.info("Logging to %s", log_path)

    settings = ExtractionSettings(comment_url=comment_url, info_url=info_url, max_pages=max_pages)
    orchestrator = ExtractionOrchestrator(
        reference=load_reference_data(reference_dir),
        settings=settings,
    )
    results = orchestrator.process(files)
    orchestrator.to_excel(results, output)
    for result in results:
        typer.echo(f"{result.document.name}: {result.status} ({result.error or f'{len(result.records)} application(s)'})")
    typer.echo(f"Wrote results to {output}")


def main():
    app()


if __name__ == "__main__":
    main()
