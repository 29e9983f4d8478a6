from __future__ import annotations

from typing import Dict, Tuple

# editorial workflow
WORD_STATUSES: Tuple[str, ...] = (
    "draft",
    "in_review",
    "reviewed",
    "rejected",
    "published",
    "imported",
    "included",
    "preredacted",
    "redacted",
    "archaic",
    "quarantined",
)
DEFAULT_CREATE_STATUS = "included"
PUBLIC_STATUS = "published"

# meaning column -> camelCase API/URL key
MEANING_MARKERS: Dict[str, str] = {
    "social_valuations": "socialValuations",
    "social_stratum_markers": "socialStratumMarkers",
    "style_markers": "styleMarkers",
    "intentionality_markers": "intentionalityMarkers",
    "geographical_markers": "geographicalMarkers",
    "chronological_markers": "chronologicalMarkers",
    "frequency_markers": "frequencyMarkers",
}
MARKER_COLUMNS: Tuple[str, ...] = tuple(MEANING_MARKERS.keys())

MEANING_TEXT_FIELDS: Tuple[str, ...] = (
    "origin",
    "observation",
    "remission",
    "grammar_category",
    "dictionary",
    "variant",
)

EXAMPLE_FIELDS: Tuple[str, ...] = (
    "author",
    "year",
    "publication",
    "format",
    "title",
    "date",
    "city",
    "editorial",
    "volume",
    "number",
    "page",
    "doi",
    "url",
)
