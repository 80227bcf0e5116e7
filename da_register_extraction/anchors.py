"""
Fuzzy location of printed labels among positioned text fragments.

Labels are frequently split across several fragments ("Application", "No")
and OCR-style noise creeps into them, so a label is found by starting at every
fragment that could begin it, walking right to assemble a phrase, and scoring
each assembled phrase by edit distance.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from .geometry import TextFragment, find_right_neighbour

MAX_CHAIN_LENGTH = 5
MAX_THRESHOLD = 2

START_LABEL = "applicationno"
# "No" is often recognised with a zero, a degree sign or a stray quote.
_START_ARTIFACTS = (
    ("n0", "no"),
    ("n°", "no"),
    ('"o', "no"),
    ('"0', "no"),
    ('"°', "no"),
    ("“°", "no"),
)

_CONDENSE_PATTERN = re.compile(r"[\s,\-_]")


@dataclass(frozen=True)
class AnchorMatch:
    left: TextFragment
    right: TextFragment
    threshold: int
    text: str


def condense(text: str) -> str:
    return _CONDENSE_PATTERN.sub("", text).lower()


def match_threshold(text: str, target: str) -> Optional[int]:
    """Smallest of 0, 1, 2 at which ``text`` matches ``target``, else None."""
    text = text.strip().lower()
    target = target.strip().lower()
    if text == target:
        return 0
    distance = Levenshtein.distance(text, target, score_cutoff=MAX_THRESHOLD)
    if distance <= MAX_THRESHOLD:
        return distance
    return None


def _chain_matches(
    fragments: Sequence[TextFragment],
    seed: TextFragment,
    target: str,
    min_length: int,
    max_length: int,
    normalize: Callable[[str], str],
) -> List[AnchorMatch]:
    matches: List[AnchorMatch] = []
    chain: List[TextFragment] = []
    current: Optional[TextFragment] = seed
    while current is not None and len(chain) < MAX_CHAIN_LENGTH:
        chain.append(current)
        assembled = normalize("".join(fragment.text for fragment in chain))
        if len(assembled) > max_length:
            break
        if len(assembled) >= min_length:
            threshold = match_threshold(assembled, target)
            if threshold is not None:
                matches.append(AnchorMatch(chain[0], chain[-1], threshold, assembled))
        current = find_right_neighbour(fragments, current)
    return matches


def _best_match(matches: Iterable[AnchorMatch], target: str) -> Optional[AnchorMatch]:
    # Trimming makes "  Plan" win over "plan)" when looking for "Plan".
    return min(
        matches,
        key=lambda match: (match.threshold, abs(len(match.text.strip()) - len(target))),
        default=None,
    )


def find_match(fragments: Sequence[TextFragment], text: str) -> Optional[AnchorMatch]:
    condensed = condense(text)
    if not condensed:
        return None
    first_character = condensed[0]
    matches: List[AnchorMatch] = []
    for seed in fragments:
        if not seed.text.strip().lower().startswith(first_character):
            continue
        matches.extend(
            _chain_matches(
                fragments,
                seed,
                condensed,
                min_length=len(text) - 2,
                max_length=len(text) + 2,
                normalize=condense,
            )
        )
    return _best_match(matches, condensed)


def find_element(
    fragments: Sequence[TextFragment], text: str, prefer_rightmost: bool
) -> Optional[TextFragment]:
    """
    Find the fragment that best matches the label ``text``.

    Returns the last fragment of the matched phrase when ``prefer_rightmost``
    is set (useful when the value sits to the right of the label) and the
    first one otherwise.
    """
    match = find_match(fragments, text)
    if match is None:
        return None
    return match.right if prefer_rightmost else match.left


def _condense_start_label(text: str) -> str:
    text = condense(text)
    for artifact, replacement in _START_ARTIFACTS:
        text = text.replace(artifact, replacement)
    return text


def find_start_elements(fragments: Sequence[TextFragment]) -> List[TextFragment]:
    """Find the "Application No" label that begins each record on a page, top first."""
    start_elements: List[TextFragment] = []
    for seed in fragments:
        if not seed.text.strip().lower().startswith("a"):
            continue
        matches = _chain_matches(
            fragments,
            seed,
            START_LABEL,
            min_length=len(START_LABEL),
            max_length=len(START_LABEL) + 2,
            normalize=_condense_start_label,
        )
        best = _best_match(matches, START_LABEL)
        if best is not None and best.right not in start_elements:
            start_elements.append(best.right)
    start_elements.sort(key=lambda element: element.y)
    return start_elements
