from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List

import fitz  # PyMuPDF

from .config import DEFAULT_MAX_PAGES
from .geometry import TextFragment


def span_to_fragment(span: Dict[str, Any]) -> TextFragment:
    """
    Convert a PyMuPDF text span into a fragment.

    The span bounding box includes line spacing, which makes neighbouring rows
    overlap; the font size measured up from the baseline is used as the height
    instead.
    """
    x0, _, x1, _ = span["bbox"]
    size = float(span["size"])
    baseline = float(span["origin"][1])
    return TextFragment(
        text=span["text"],
        x=float(x0),
        y=baseline - size,
        width=float(x1 - x0),
        height=size,
    )


def page_fragments(page: "fitz.Page") -> List[TextFragment]:
    fragments: List[TextFragment] = []
    for block in page.get_text("dict")["blocks"]:
        for line in block.get("lines", []):
            for span in line["spans"]:
                if span["text"].strip():
                    fragments.append(span_to_fragment(span))
    fragments.sort(key=lambda fragment: (fragment.y, fragment.x))
    return fragments


@dataclass
class PDFPreprocessor:
    """
    Reads positioned text fragments from a PDF, one page at a time.
    """

    max_pages: int | None = DEFAULT_MAX_PAGES

    def iter_pages(self, file_path: Path) -> Iterator[List[TextFragment]]:
        with fitz.open(file_path) as doc:
            for page_index in range(len(doc)):
                if self.max_pages is not None and page_index >= self.max_pages:
                    break
                page = doc.load_page(page_index)
                yield page_fragments(page)
