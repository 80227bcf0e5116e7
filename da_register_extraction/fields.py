"""
Rectangular field extraction.

Each field value is read from a rectangle whose edges are given by up to three
printed labels: the label the value belongs to, and optionally a label that
bounds it horizontally and one that bounds it from below. A missing or
unresolved bound leaves that side of the rectangle open.
"""

from __future__ import annotations

import math
import re
from typing import List, Optional, Sequence

from .anchors import find_element
from .geometry import Rectangle, TextFragment, intersect

_WHITESPACE_RUN = re.compile(r"\s\s+")


def _resolve(fragments: Sequence[TextFragment], label: Optional[str]) -> Optional[TextFragment]:
    if label is None:
        return None
    return find_element(fragments, label, False)


def collect_text(fragments: Sequence[TextFragment], bounds: Rectangle) -> Optional[str]:
    """Join the fragments lying mostly inside ``bounds`` in reading order."""
    inside: List[TextFragment] = []
    for fragment in fragments:
        area = fragment.area
        if area <= 0 or fragment.text.strip() == ":":
            continue
        if intersect(fragment, bounds).area * 2 > area:
            inside.append(fragment)
    if not inside:
        return None
    inside.sort(key=lambda fragment: (fragment.y, fragment.x))
    text = " ".join(fragment.text for fragment in inside).strip()
    return _WHITESPACE_RUN.sub(" ", text)


def extract_right(
    fragments: Sequence[TextFragment],
    origin_label: str,
    right_label: Optional[str] = None,
    bottom_label: Optional[str] = None,
) -> Optional[str]:
    """Text to the right of ``origin_label``, up to ``right_label`` and above ``bottom_label``."""
    origin = find_element(fragments, origin_label, True)
    if origin is None:
        return None
    right = _resolve(fragments, right_label)
    bottom = _resolve(fragments, bottom_label)

    x = origin.right
    y = origin.y
    width = math.inf if right is None else right.x - x
    height = math.inf if bottom is None else bottom.y - y
    return collect_text(fragments, Rectangle(x, y, width, height))


def extract_left(
    fragments: Sequence[TextFragment],
    origin_label: str,
    left_label: Optional[str] = None,
    bottom_label: Optional[str] = None,
) -> Optional[str]:
    """Text to the left of ``origin_label``, right of ``left_label`` and above ``bottom_label``."""
    origin = find_element(fragments, origin_label, True)
    if origin is None:
        return None
    left = _resolve(fragments, left_label)
    bottom = _resolve(fragments, bottom_label)

    x = 0.0 if left is None else left.right
    y = origin.y
    width = origin.x - x
    height = math.inf if bottom is None else bottom.y - y
    return collect_text(fragments, Rectangle(x, y, width, height))


def extract_down(
    fragments: Sequence[TextFragment],
    origin_label: str,
    right_label: Optional[str] = None,
    bottom_label: Optional[str] = None,
) -> Optional[str]:
    """Text below ``origin_label``, left of ``right_label`` and above ``bottom_label``."""
    origin = find_element(fragments, origin_label, True)
    if origin is None:
        return None
    right = _resolve(fragments, right_label)
    bottom = _resolve(fragments, bottom_label)

    x = origin.x
    y = origin.bottom
    width = math.inf if right is None else right.x - x
    height = math.inf if bottom is None else bottom.y - y
    return collect_text(fragments, Rectangle(x, y, width, height))
