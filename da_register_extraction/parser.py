from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import List, Optional, Sequence

from pydantic import ValidationError

from .addresses import resolve_address
from .config import ExtractionSettings
from .fields import extract_down, extract_left, extract_right
from .geometry import TextFragment
from .reference import ReferenceData
from .schema import (
    APPLICATION_NUMBER,
    DESCRIPTION,
    HOUSE_NUMBER,
    LEGAL_DESCRIPTION_PARTS,
    RECEIVED_DATE_LAYOUTS,
    STREET_NAME,
    SUBURB_NAME,
    DevelopmentApplication,
    FieldSpec,
)
from .segmenter import RecordGroup

logger = logging.getLogger(__name__)

# "I", "l" and "," are misread slashes in application numbers such as 345/12/19.
_APPLICATION_NUMBER_CONFUSIONS = re.compile(r"[Il,]")

# Day may be one digit, month is always two: D/MM/YYYY.
_RECEIVED_DATE = re.compile(r"\d{1,2}/\d{2}/\d{4}")

_EXTRACTORS = {
    "right": extract_right,
    "left": extract_left,
    "down": extract_down,
}


def extract(fragments: Sequence[TextFragment], spec: FieldSpec) -> Optional[str]:
    return _EXTRACTORS[spec.direction](fragments, spec.origin, spec.bound, spec.bottom)


def summarize(fragments: Sequence[TextFragment]) -> str:
    return "".join(f"[{fragment.text}]" for fragment in fragments)


def parse_received_date(text: Optional[str]) -> Optional[date]:
    if not text or not _RECEIVED_DATE.fullmatch(text.strip()):
        return None
    try:
        return datetime.strptime(text.strip(), "%d/%m/%Y").date()
    except ValueError:
        return None


class ApplicationParser:
    """
    Turns the fragments of one record group into a DevelopmentApplication.

    Records missing a mandatory field (application number, street, suburb, or
    a usable address) are logged and skipped by returning None.
    """

    def __init__(self, reference: ReferenceData, settings: ExtractionSettings | None = None):
        self.reference = reference
        self.settings = settings or ExtractionSettings()

    def _received_date(self, fragments: Sequence[TextFragment]) -> Optional[date]:
        texts = {fragment.text.strip() for fragment in fragments}
        for label, (primary, fallback) in RECEIVED_DATE_LAYOUTS.items():
            if label in texts:
                text = extract(fragments, primary)
                if text is None:
                    text = extract(fragments, fallback)
                return parse_received_date(text)
        return None

    def _legal_description(self, fragments: Sequence[TextFragment]) -> str:
        parts: List[str] = []
        for spec in LEGAL_DESCRIPTION_PARTS:
            value = extract(fragments, spec)
            if value is not None:
                parts.append(f"{spec.name} {value}")
        return ", ".join(parts)

    def parse(self, group: RecordGroup, info_url: str = "") -> Optional[DevelopmentApplication]:
        fragments = group.fragments

        application_number = extract(fragments, APPLICATION_NUMBER)
        if not application_number:
            logger.warning(
                "Could not find the application number for the record starting at %r; "
                "the record will be ignored. Elements: %s",
                group.start_anchor.text,
                summarize(fragments),
            )
            return None
        application_number = _APPLICATION_NUMBER_CONFUSIONS.sub("/", application_number)
        logger.info("Found %r", application_number)

        house_number = extract(fragments, HOUSE_NUMBER)
        if house_number is None or house_number == "0":
            house_number = ""

        street_name = extract(fragments, STREET_NAME)
        if street_name in (None, "", "0"):
            logger.warning(
                "Application %s will be ignored because there is no street name. Elements: %s",
                application_number,
                summarize(fragments),
            )
            return None

        suburb_name = extract(fragments, SUBURB_NAME)
        if suburb_name in (None, "", "0"):
            logger.warning(
                "Application %s will be ignored because there is no suburb name for street %r. "
                "Elements: %s",
                application_number,
                street_name,
                summarize(fragments),
            )
            return None

        address = resolve_address(
            house_number, street_name, suburb_name, self.reference, sentinel=self.settings.sentinel
        )
        if not address:
            logger.warning(
                "Application %s will be ignored because no address could be reconstructed "
                "from %r / %r / %r",
                application_number,
                house_number,
                street_name,
                suburb_name,
            )
            return None

        try:
            return DevelopmentApplication(
                application_number=application_number,
                address=address,
                description=extract(fragments, DESCRIPTION) or "",
                info_url=info_url,
                comment_url=self.settings.comment_url,
                date_received=self._received_date(fragments),
                legal_description=self._legal_description(fragments),
            )
        except ValidationError:
            logger.exception("Application %s failed validation", application_number)
            return None
