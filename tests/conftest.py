from __future__ import annotations

from typing import List

import pytest

from da_register_extraction.geometry import TextFragment
from da_register_extraction.reference import ReferenceData

CHAR_WIDTH = 6
ROW_HEIGHT = 10


def frag(text: str, x: float, y: float, width: float | None = None, height: float = ROW_HEIGHT) -> TextFragment:
    return TextFragment(text=text, x=x, y=y, width=len(text) * CHAR_WIDTH if width is None else width, height=height)


def record_fragments(
    top: float,
    application_number: str = "345/12/19",
    house_number: str = "35",
    street_name: str = "RAILWAY TERRACE",
    suburb_name: str = "PASKEVILLE SA",
    description: str = "Dwelling and garage",
    received: str = "14/03/2019",
) -> List[TextFragment]:
    """One register record laid out the way the council PDFs print it."""

    def row(index: int) -> float:
        return top + index * 20

    fragments = [
        frag("Application No", 20, row(0)),
        frag(application_number, 130, row(0)),
        frag("Application Date", 250, row(0)),
        frag("12/03/2019", 360, row(0)),
        frag("Applicants Name", 20, row(1)),
        frag("J Smith", 130, row(1)),
        frag("Application Received", 20, row(2)),
        frag(received, 150, row(2)),
        frag("Planning Approval", 300, row(2)),
        frag("Land Division Approval", 20, row(3)),
        frag("Property House No", 20, row(4)),
        frag(house_number, 140, row(4)),
        frag("Planning Conditions", 300, row(4)),
        frag("Lot", 20, row(5)),
        frag("12", 140, row(5)),
        frag("Section", 20, row(6)),
        frag("345", 140, row(6)),
        frag("Plan", 20, row(7)),
        frag("D1234", 140, row(7)),
        frag("Property street", 20, row(8)),
        frag(street_name, 140, row(8)),
        frag("Property suburb", 20, row(9)),
        frag(suburb_name, 140, row(9)),
        frag("Title", 20, row(10)),
        frag("CT5432/12", 140, row(10)),
        frag("Hundred", 20, row(11)),
        frag("KULPARA", 140, row(11)),
        frag("Development Description", 20, row(12)),
        frag("Relevant Authority", 300, row(12)),
        frag(description, 20, row(13)),
        frag("Private Certifier Name", 20, row(14)),
    ]
    return [fragment for fragment in fragments if fragment.text]


def page_fragments(*records: List[TextFragment]) -> List[TextFragment]:
    fragments = [fragment for record in records for fragment in record]
    fragments.sort(key=lambda fragment: (fragment.y, fragment.x))
    return fragments


@pytest.fixture
def reference() -> ReferenceData:
    return ReferenceData.build(
        street_names={
            "RAILWAY TCE SOUTH": ["PASKEVILLE"],
            "SCHOOL TERRACE": ["PASKEVILLE"],
            "RAILWAY TERRACE": ["PASKEVILLE"],
            "ROSSLYN ROAD": ["WALLAROO"],
            "SWIFT WINGS ROAD": ["WALLAROO"],
            "MAIN ROAD": ["KULPARA"],
        },
        street_suffixes={"TCE": "TERRACE", "RD": "ROAD", "ST": "STREET"},
        suburb_names={"PASKEVILLE": "PASKEVILLE", "WALLAROO": "WALLAROO", "KADINA TOWN": "KADINA"},
        hundred_names=["KULPARA", "WALLAROO"],
    )
