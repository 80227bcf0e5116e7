"""
Address formatting and reconstruction of merged address slots.

Some registers record two addresses (typically the two frontages of a corner
block) in the same house number, street and suburb slots, separated by a
sentinel character. The merge is lossy. For example::

    House Number: ü35
          Street: RAILWAYüSCHOOL TCE SOUTHüTERRA
          Suburb: PASKEVILLEüPASKEVILLE

holds "RAILWAY TCE SOUTH, PASKEVILLE" and "35 SCHOOL TERRACE, PASKEVILLE",
whereas::

    House Number: 79ü4
          Street: ROSSLYNüSWIFT WINGS ROADüROAD
          Suburb: WALLAROOüWALLAROO

holds "79 ROSSLYN ROAD, WALLAROO" and "4 SWIFT WINGS ROAD, WALLAROO". Each
street name was cut in two and the halves were joined pairwise, so the middle
street token contains one space that belongs to neither name. Which space it
is can only be decided by trying each one against the known street names.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from .reference import ReferenceData

logger = logging.getLogger(__name__)

DEFAULT_SENTINEL = "ü"
MAX_STREET_THRESHOLD = 2
HUNDRED_SUFFIXES = (" HD", " HUNDRED")

_WHITESPACE_RUN = re.compile(r"\s+")
_SUBURB_PREFIX = re.compile(r"^HD\s+", re.IGNORECASE)
_SUBURB_SUFFIX = re.compile(r"\s+SA$", re.IGNORECASE)


@dataclass(frozen=True)
class SingleField:
    text: str


@dataclass(frozen=True)
class MultiplexedField:
    values: Tuple[str, ...]

    def padded(self, count: int) -> List[str]:
        values = list(self.values[:count])
        return values + [""] * (count - len(values))


Field = Union[SingleField, MultiplexedField]


def parse_field(raw: str, sentinel: str = DEFAULT_SENTINEL) -> Field:
    if sentinel and sentinel in raw:
        return MultiplexedField(tuple(raw.split(sentinel)))
    return SingleField(raw)


def _values(field_value: Field, count: int) -> List[str]:
    if isinstance(field_value, MultiplexedField):
        return field_value.padded(count)
    return MultiplexedField((field_value.text,)).padded(count)


@dataclass(eq=False)
class Candidate:
    """One way of splitting the ambiguous middle street token."""

    group1: Tuple[str, ...]
    group2: Tuple[str, ...]
    has_invalid_hundred_name: bool = False


@dataclass(frozen=True)
class ScoredAddress:
    house_number: str
    street_name: str
    suburb_name: str
    threshold: float
    candidate: Candidate = field(compare=False)

    @property
    def has_house_number(self) -> bool:
        return bool(self.house_number.strip())


def rank_key(address: ScoredAddress) -> Tuple[bool, float, bool, bool]:
    """
    Sort key, best first.

    A house number outweighs a better street match only while both matches
    are close (threshold <= 2). An invalid hundred name anywhere in a
    candidate marks the whole split as suspect.
    """
    has_house_number = address.has_house_number
    return (
        not (has_house_number and address.threshold <= MAX_STREET_THRESHOLD),
        address.threshold,
        not has_house_number,
        address.candidate.has_invalid_hundred_name,
    )


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(" ", text).strip()


def canonical_suburb(suburb_name: str, reference: ReferenceData) -> str:
    # Drop the "HD " (hundred) prefix and the state suffix.
    suburb_name = _SUBURB_SUFFIX.sub("", _SUBURB_PREFIX.sub("", suburb_name.strip()))
    return reference.suburb_names.get(suburb_name.upper(), suburb_name)


def format_address(
    house_number: str, street_name: str, suburb_name: str, reference: ReferenceData
) -> str:
    suburb_name = canonical_suburb(suburb_name, reference)
    address = f"{house_number.strip()} {street_name.strip()}"
    if suburb_name:
        address += f", {suburb_name}"
    return collapse_whitespace(address.upper())


def expand_suffix(token: str, reference: ReferenceData) -> str:
    """Expand an abbreviated trailing word, e.g. "TCE" to "TERRACE"."""
    words = token.split()
    if words:
        words[-1] = reference.street_suffixes.get(words[-1].upper(), words[-1])
    return " ".join(words)


def match_street_name(street_name: str, reference: ReferenceData) -> Tuple[str, float]:
    """
    Closest known street name within an edit distance of 2.

    Returns the vocabulary spelling and its distance, or the input with an
    infinite threshold when nothing is close enough.
    """
    query = collapse_whitespace(street_name).upper()
    if query in reference.street_names:
        return query, 0
    result = process.extractOne(
        query,
        reference.street_names.keys(),
        scorer=Levenshtein.distance,
        score_cutoff=MAX_STREET_THRESHOLD,
    )
    if result is None:
        return street_name, math.inf
    match, distance, _ = result
    return match, distance


def hundred_name(street_name: str) -> Optional[str]:
    upper = street_name.upper()
    for suffix in HUNDRED_SUFFIXES:
        if upper.endswith(suffix):
            return upper[: -len(suffix)].strip()
    return None


def _street_tokens(street_name: str, sentinel: str, count: int) -> List[str]:
    tokens = street_name.split(sentinel)
    expected = 2 * count - 1
    if len(tokens) > expected:
        # More separators than the house number implies; fold the surplus into the last slot.
        tokens = tokens[: expected - 1] + [" ".join(tokens[expected - 1 :])]
    return tokens + [""] * (expected - len(tokens))


def direct_candidate(street_name: str, sentinel: str, count: int) -> Optional[Candidate]:
    """
    The plain split when the street holds exactly one token per address, as in
    "SMITH STREETüRAILWAY TERRACE".
    """
    tokens = street_name.split(sentinel)
    if len(tokens) != count:
        return None
    return Candidate(group1=tuple(tokens), group2=("",) * count)


def split_candidates(street_tokens: Sequence[str], count: int) -> List[Candidate]:
    """One candidate per space in the middle token (index ``count - 1``)."""
    middle = street_tokens[count - 1]
    if " " not in middle:
        # Truncated source text; assume the second half of the split is missing.
        middle += " "
    candidates: List[Candidate] = []
    for index, character in enumerate(middle):
        if character != " ":
            continue
        candidates.append(
            Candidate(
                group1=tuple(street_tokens[: count - 1]) + (middle[:index],),
                group2=(middle[index + 1 :],) + tuple(street_tokens[count:]),
            )
        )
    return candidates


def score_candidates(
    candidates: Sequence[Candidate],
    house_numbers: Sequence[str],
    suburb_names: Sequence[str],
    reference: ReferenceData,
) -> List[ScoredAddress]:
    addresses: List[ScoredAddress] = []
    for candidate in candidates:
        for index, house_number in enumerate(house_numbers):
            street_name = collapse_whitespace(
                f"{candidate.group1[index]} {expand_suffix(candidate.group2[index], reference)}"
            )
            if not street_name:
                continue
            hundred = hundred_name(street_name)
            if hundred is not None:
                if hundred not in reference.hundred_names:
                    candidate.has_invalid_hundred_name = True
                continue
            matched_name, threshold = match_street_name(street_name, reference)
            addresses.append(
                ScoredAddress(
                    house_number=house_number.strip(),
                    street_name=matched_name,
                    suburb_name=suburb_names[index],
                    threshold=threshold,
                    candidate=candidate,
                )
            )
    return addresses


def resolve_address(
    house_number: str,
    street_name: str,
    suburb_name: str,
    reference: ReferenceData,
    *,
    sentinel: str = DEFAULT_SENTINEL,
) -> Optional[str]:
    """
    Format an address, reconstructing the most plausible one when the slots
    hold several merged addresses.

    Returns None when a merged slot yields no usable street name.
    """
    house_field = parse_field(house_number, sentinel)
    if isinstance(house_field, SingleField):
        if sentinel:
            street_name = street_name.replace(sentinel, " ")
            suburb_name = suburb_name.replace(sentinel, " ")
        return format_address(house_field.text, street_name, suburb_name, reference)

    count = len(house_field.values)
    house_numbers = house_field.values
    suburb_names = _values(parse_field(suburb_name, sentinel), count)
    candidates = split_candidates(_street_tokens(street_name, sentinel, count), count)
    direct = direct_candidate(street_name, sentinel, count)
    if direct is not None:
        candidates.insert(0, direct)

    addresses = score_candidates(candidates, house_numbers, suburb_names, reference)
    if not addresses:
        logger.debug("No address candidates for %r / %r / %r", house_number, street_name, suburb_name)
        return None

    addresses.sort(key=rank_key)
    best = addresses[0]
    suburb = best.suburb_name
    if not suburb.strip():
        # A shorter suburb slot than house number slot; borrow a suburb that is present.
        suburb = next((name for name in suburb_names if name.strip()), "")
    logger.debug(
        "Resolved %r / %r to %r (threshold %s, %d candidates)",
        house_number,
        street_name,
        best.street_name,
        best.threshold,
        len(addresses),
    )
    return format_address(best.house_number, best.street_name, suburb, reference)
