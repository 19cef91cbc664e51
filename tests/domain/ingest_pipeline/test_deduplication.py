from __future__ import annotations

from bulkadd.domain.ingest_pipeline.deduplication import (
    AdvisoryDuplicatePolicy,
    DuplicateDetector,
    SkipDuplicatesPolicy,
    city_component,
)
from bulkadd.domain.model import CandidateRecord, DuplicateRef, DuplicateSource, ReferenceItem


def _candidate(line: int, name: str, location: str = "") -> CandidateRecord:
    return CandidateRecord(
        line_number=line,
        raw_text=f"{name} | restaurant | {location}",
        name=name,
        location_hint=location,
    )


def test_city_component_takes_first_comma_part() -> None:
    assert city_component(" Brooklyn , NY") == "Brooklyn"
    assert city_component("") == ""


def test_later_batch_duplicates_point_at_first_occurrence() -> None:
    candidates = [
        _candidate(1, "Joe's Pizza", "New York"),
        _candidate(2, "JOE'S PIZZA", "new york, NY"),
        _candidate(3, "joe's pizza", "New York"),
    ]

    annotated = DuplicateDetector().detect(candidates)

    first_ref = DuplicateRef(source=DuplicateSource.BATCH, name="Joe's Pizza", line_number=1)
    assert [candidate.duplicate_of for candidate in annotated] == [None, first_ref, first_ref]


def test_same_name_in_different_city_is_not_a_duplicate() -> None:
    annotated = DuplicateDetector().detect(
        [_candidate(1, "Joe's Pizza", "New York"), _candidate(2, "Joe's Pizza", "Brooklyn")]
    )

    assert not any(candidate.is_duplicate for candidate in annotated)


def test_both_locations_empty_counts_as_match() -> None:
    annotated = DuplicateDetector().detect([_candidate(1, "Lucali"), _candidate(2, "lucali ")])

    assert annotated[1].duplicate_of is not None
    assert annotated[1].duplicate_of.line_number == 1


def test_reference_match_wins_over_batch_match() -> None:
    reference = [
        ReferenceItem(name="Other", location_hint="Queens"),
        ReferenceItem(name="Joe's Pizza", location_hint="New York, NY"),
    ]
    candidates = [_candidate(1, "Joe's Pizza", "New York"), _candidate(2, "Joe's Pizza", "New York")]

    annotated = DuplicateDetector().detect(candidates, reference)

    expected = DuplicateRef(
        source=DuplicateSource.REFERENCE, name="Joe's Pizza", reference_index=1
    )
    assert [candidate.duplicate_of for candidate in annotated] == [expected, expected]


def test_detection_leaves_other_fields_untouched() -> None:
    original = _candidate(4, "Via Carota", "West Village")

    (annotated,) = DuplicateDetector().detect([original])

    assert annotated == original


def test_policies() -> None:
    duplicate = _candidate(2, "Lucali").with_duplicate(
        DuplicateRef(source=DuplicateSource.BATCH, name="Lucali", line_number=1)
    )
    unique = _candidate(1, "Lucali")

    assert AdvisoryDuplicatePolicy().should_skip(duplicate) is False
    assert SkipDuplicatesPolicy().should_skip(duplicate) is True
    assert SkipDuplicatesPolicy().should_skip(unique) is False
