"""Turn free-form bulk-add text into candidate records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, NamedTuple

from bulkadd.domain.model import DEFAULT_ENTITY_TYPE, CandidateRecord, ParseError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Checked in order; the first one present in a line wins.
DELIMITERS: Final[tuple[str, ...]] = ("|", ";")
FIELD_COUNT: Final[int] = 4
MISSING_NAME: Final[str] = "missing name"


def detect_delimiter(line: str) -> str | None:
    for delimiter in DELIMITERS:
        if delimiter in line:
            return delimiter
    return None


def split_fields(line: str) -> tuple[str, str, str, str]:
    """Split ``line`` into exactly four trimmed fields (name, type, location, tags)."""

    delimiter = detect_delimiter(line)
    parts = line.split(delimiter) if delimiter is not None else [line]
    fields = [part.strip() for part in parts[:FIELD_COUNT]]
    fields.extend("" for _ in range(FIELD_COUNT - len(fields)))
    name, entity_type, location, tags = fields
    return name, entity_type, location, tags


class ParseOutcome(NamedTuple):
    """``(candidates, errors)``; unpacks like a plain pair."""

    candidates: tuple[CandidateRecord, ...]
    errors: tuple[ParseError, ...]

    @property
    def line_count(self) -> int:
        return len(self.candidates) + len(self.errors)


class LineParser:
    """Stateless parser; the same input always yields the same records.

    Line numbers are 1-based positions in the original input, blank lines
    included, so reported errors point at what the user actually typed.
    """

    def parse(self, lines: Iterable[str]) -> ParseOutcome:
        candidates: list[CandidateRecord] = []
        errors: list[ParseError] = []

        for index, raw in enumerate(lines, start=1):
            raw_text = raw.rstrip("\r\n")
            if not raw_text.strip():
                continue

            name, entity_type, location, tags = split_fields(raw_text)
            if not name:
                errors.append(ParseError(line_number=index, raw_text=raw_text, reason=MISSING_NAME))
                continue

            candidates.append(
                CandidateRecord(
                    line_number=index,
                    raw_text=raw_text,
                    name=name,
                    entity_type=entity_type or DEFAULT_ENTITY_TYPE,
                    location_hint=location,
                    tags_raw=tags,
                )
            )

        return ParseOutcome(candidates=tuple(candidates), errors=tuple(errors))

    def parse_text(self, raw_text: str) -> ParseOutcome:
        return self.parse(raw_text.splitlines())


def count_nonblank(raw_text: str) -> int:
    return sum(1 for line in raw_text.splitlines() if line.strip())
