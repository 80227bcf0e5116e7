from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

Direction = Literal["right", "left", "down"]

NO_DESCRIPTION = "No Description Provided"


@dataclass(frozen=True)
class FieldSpec:
    """Where a field's value sits relative to the printed labels of a record."""

    name: str
    origin: str
    bound: Optional[str] = None
    bottom: Optional[str] = None
    direction: Direction = "right"


# Register layout, one record per "Application No" row.
APPLICATION_NUMBER = FieldSpec("application_number", "Application No", "Application Date", "Applicants Name")
HOUSE_NUMBER = FieldSpec("house_number", "Property House No", "Planning Conditions", "Lot")
STREET_NAME = FieldSpec("street_name", "Property street", "Planning Conditions", "Property suburb")
SUBURB_NAME = FieldSpec("suburb_name", "Property suburb", "Planning Conditions", "Title")
DESCRIPTION = FieldSpec(
    "description", "Development Description", "Relevant Authority", "Private Certifier Name", "down"
)

# Optional parts of the legal description, in output order.
LEGAL_DESCRIPTION_PARTS: Tuple[FieldSpec, ...] = (
    FieldSpec("Lot", "Lot", "Planning Conditions", "Section"),
    FieldSpec("Section", "Section", "Planning Conditions", "Plan"),
    FieldSpec("Plan", "Plan", "Planning Conditions", "Property Street"),
    FieldSpec("Title", "Title", "Planning Conditions", "Hundred"),
    FieldSpec("Hundred", "Hundred", "Planning Conditions", "Development Description"),
)

# The received date moves between layouts; the key is the label that selects
# the layout, the value is the primary spec and its fallback.
RECEIVED_DATE_LAYOUTS: Dict[str, Tuple[FieldSpec, FieldSpec]] = {
    "Application Received": (
        FieldSpec("date_received", "Application Received", "Planning Approval", "Land Division Approval"),
        FieldSpec("date_received", "Application Date", "Planning Approval", "Application Received"),
    ),
    "Application received": (
        FieldSpec("date_received", "Application received", "Planning Approval", "Land Division Approval"),
        FieldSpec("date_received", "Application Date", "Planning Approval", "Application received"),
    ),
    "Building Approval": (
        FieldSpec("date_received", "Building Approval", "Application Date", "Building  received", "left"),
        FieldSpec("date_received", "Application Date", "Planning Approval", "Building Approval"),
    ),
}


class DevelopmentApplication(BaseModel):
    """One development application read from a register page."""

    application_number: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    description: str = NO_DESCRIPTION
    info_url: str = ""
    comment_url: str = ""
    date_scraped: date = Field(default_factory=date.today)
    date_received: Optional[date] = None
    legal_description: str = ""

    model_config = {"extra": "forbid"}

    @field_validator("description")
    @classmethod
    def default_description(cls, value: str) -> str:
        value = value.strip()
        return value or NO_DESCRIPTION

    def to_row(self) -> Dict[str, object]:
        row = self.model_dump()
        row["date_scraped"] = self.date_scraped.isoformat()
        row["date_received"] = self.date_received.isoformat() if self.date_received else ""
        return row
