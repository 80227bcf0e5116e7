from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .anchors import find_start_elements
from .geometry import Box, Rectangle, TextFragment, is_vertical_overlap, vertical_overlap_percentage


@dataclass(frozen=True)
class RecordGroup:
    """The fragments of one page attributed to a single application."""

    start_anchor: TextFragment
    fragments: Tuple[TextFragment, ...]


def row_top(fragments: Sequence[TextFragment], anchor: Box) -> float:
    """Highest y of the fragments sharing a row with ``anchor``."""
    top = anchor.y
    for fragment in fragments:
        # The 50% rule keeps very tall fragments from pulling every row up.
        if (
            is_vertical_overlap(anchor, fragment)
            and vertical_overlap_percentage(anchor, fragment) > 50
            and fragment.y < top
        ):
            top = fragment.y
    return top


def _raised(anchor: TextFragment) -> Rectangle:
    # Lodged dates and similar values sometimes sit slightly above the label.
    return Rectangle(anchor.x, anchor.y - anchor.height / 2, anchor.width, anchor.height)


def segment_page(fragments: Sequence[TextFragment]) -> List[RecordGroup]:
    start_elements = find_start_elements(fragments)
    tops = [row_top(fragments, _raised(anchor)) for anchor in start_elements]
    tops.append(math.inf)

    groups: List[RecordGroup] = []
    for index, anchor in enumerate(start_elements):
        top, next_top = tops[index], tops[index + 1]
        groups.append(
            RecordGroup(
                start_anchor=anchor,
                fragments=tuple(f for f in fragments if top <= f.y < next_top),
            )
        )
    return groups
