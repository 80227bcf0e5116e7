from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Sequence, Tuple

logger = logging.getLogger(__name__)

STREET_NAMES_FILE = "streetnames.txt"
STREET_SUFFIXES_FILE = "streetsuffixes.txt"
SUBURB_NAMES_FILE = "suburbnames.txt"
HUNDRED_NAMES_FILE = "hundrednames.txt"


class ReferenceDataError(ValueError):
    """A reference table line could not be parsed."""


@dataclass(frozen=True)
class ReferenceData:
    """
    Read-only vocabularies used to validate and canonicalise addresses.

    Built once at start-up and passed to every component that needs it.
    Keys are upper case.
    """

    street_names: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    street_suffixes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    suburb_names: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    hundred_names: FrozenSet[str] = frozenset()

    @classmethod
    def build(
        cls,
        street_names: Mapping[str, Sequence[str]] | None = None,
        street_suffixes: Mapping[str, str] | None = None,
        suburb_names: Mapping[str, str] | None = None,
        hundred_names: Iterable[str] | None = None,
    ) -> "ReferenceData":
        """Create reference data from plain collections, normalising keys to upper case."""
        return cls(
            street_names=MappingProxyType(
                {k.strip().upper(): tuple(s.strip().upper() for s in v) for k, v in (street_names or {}).items()}
            ),
            street_suffixes=MappingProxyType(
                {k.strip().upper(): v.strip().upper() for k, v in (street_suffixes or {}).items()}
            ),
            suburb_names=MappingProxyType(
                {k.strip().upper(): v.strip().upper() for k, v in (suburb_names or {}).items()}
            ),
            hundred_names=frozenset(name.strip().upper() for name in (hundred_names or ())),
        )


def _lines(path: Path) -> Iterator[Tuple[int, str]]:
    text = path.read_text(encoding="utf-8").replace("\r", "")
    for number, line in enumerate(text.split("\n"), start=1):
        line = line.strip()
        if line:
            yield number, line.upper()


def _pairs(path: Path) -> Iterator[Tuple[str, str]]:
    for number, line in _lines(path):
        tokens = line.split(",")
        if len(tokens) < 2 or not tokens[0].strip():
            raise ReferenceDataError(f"{path.name}:{number}: expected 'NAME,VALUE', got {line!r}")
        yield tokens[0].strip(), tokens[1].strip()


def _optional(path: Path) -> bool:
    if path.exists():
        return True
    logger.warning("Reference table %s not found; continuing without it", path)
    return False


def load_reference_data(directory: Path) -> ReferenceData:
    """
    Load the four reference tables from ``directory``.

    Street and suburb names are required; suffix and hundred tables are
    optional and default to empty.
    """
    directory = Path(directory)

    street_names: Dict[str, List[str]] = {}
    for street, suburb in _pairs(directory / STREET_NAMES_FILE):
        # The same street name exists in several suburbs.
        street_names.setdefault(street, []).append(suburb)

    suburb_names: Dict[str, str] = dict(_pairs(directory / SUBURB_NAMES_FILE))

    street_suffixes: Dict[str, str] = {}
    suffix_path = directory / STREET_SUFFIXES_FILE
    if _optional(suffix_path):
        street_suffixes = dict(_pairs(suffix_path))

    hundred_names: List[str] = []
    hundred_path = directory / HUNDRED_NAMES_FILE
    if _optional(hundred_path):
        hundred_names = [line for _, line in _lines(hundred_path)]

    logger.info(
        "Loaded %d street names, %d suffixes, %d suburb names, %d hundred names",
        len(street_names),
        len(street_suffixes),
        len(suburb_names),
        len(hundred_names),
    )
    return ReferenceData.build(
        street_names=street_names,
        street_suffixes=street_suffixes,
        suburb_names=suburb_names,
        hundred_names=hundred_names,
    )
