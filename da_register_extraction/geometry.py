from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

# Horizontal gap beyond which two fragments are not treated as one phrase.
MAX_NEIGHBOUR_GAP = 30
# Fraction of an element's width that a right neighbour may overlap it by.
NEIGHBOUR_OVERLAP_FACTOR = 0.2


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0:
            object.__setattr__(self, "width", 0.0)
        if self.height < 0:
            object.__setattr__(self, "height", 0.0)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class TextFragment:
    """One positioned run of text on a page (y grows downward)."""

    text: str
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height


Box = Union[Rectangle, TextFragment]

EMPTY_RECTANGLE = Rectangle(0.0, 0.0, 0.0, 0.0)


def intersect(a: Box, b: Box) -> Rectangle:
    x1 = max(a.x, b.x)
    y1 = max(a.y, b.y)
    x2 = min(a.right, b.right)
    y2 = min(a.bottom, b.bottom)
    if x2 >= x1 and y2 >= y1:
        return Rectangle(x1, y1, x2 - x1, y2 - y1)
    return EMPTY_RECTANGLE


def is_vertical_overlap(a: Box, b: Box) -> bool:
    return b.y < a.bottom and b.bottom > a.y


def vertical_overlap_percentage(a: Box, b: Box) -> float:
    """
    Percentage of ``b``'s height that overlaps ``a`` vertically.

    Relative to the second argument only: a tall ``a`` fully covers a short
    ``b`` (100) while the reverse is a small number.
    """
    if b.height <= 0:
        return 0.0
    y1 = max(a.y, b.y)
    y2 = min(a.bottom, b.bottom)
    if y2 < y1:
        return 0.0
    return (y2 - y1) * 100.0 / b.height


def distance_squared(a: Box, b: Box) -> float:
    """Squared distance from the right-middle of ``a`` to the left-middle of ``b``."""
    x1, y1 = a.right, a.y + a.height / 2
    x2, y2 = b.x, b.y + b.height / 2
    if x2 < x1 - a.width * NEIGHBOUR_OVERLAP_FACTOR:
        return math.inf
    return (x2 - x1) ** 2 + (y2 - y1) ** 2


def find_right_neighbour(
    fragments: Sequence[TextFragment], fragment: TextFragment
) -> Optional[TextFragment]:
    closest: Optional[TextFragment] = None
    closest_distance = math.inf
    for candidate in fragments:
        if not is_vertical_overlap(fragment, candidate):
            continue
        # Tall elements span several rows; require most of the candidate to line up.
        if vertical_overlap_percentage(fragment, candidate) <= 50:
            continue
        if candidate.x <= fragment.right:
            continue
        if candidate.x - fragment.right >= MAX_NEIGHBOUR_GAP:
            continue
        distance = distance_squared(fragment, candidate)
        if distance < closest_distance:
            closest = candidate
            closest_distance = distance
    return closest
