"""Tolerant parsers that turn free-form model text into typed results.

Model output is unstructured, so both parsers are total: malformed text yields
a degraded but valid result instead of an exception.
"""

import re
from typing import Optional, Sequence
from habitus.models.insight import (
    MAX_FOLLOW_UP_QUESTIONS,
    MAX_REASONS,
    MAX_TOP_PICKS,
    MessageSuggestion,
    RankedProperties,
    RankedProperty,
)
from habitus.models.property import Property
from habitus.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

CLARIFYING_QUESTION = "Would you prefer newer construction or established neighborhoods?"

# "ID:" must start a word so "PAID:" is not mistaken for a marker
_ID_MARKER = re.compile(r"\bID:")
_REASONS_MARKER = re.compile(r"reasons\s*:", re.IGNORECASE)
_RISK_MARKER = re.compile(r"risk\s*:", re.IGNORECASE)
_WRAPPING_CHARS = "[]()<>*_`\"'| "
# Ids also shed trailing list punctuation, as in "ID: 1, Reasons: ..."
_ID_WRAPPING_CHARS = _WRAPPING_CHARS + ",.;:"


def _clean_token(text: str) -> str:
    return text.strip().strip(_WRAPPING_CHARS).strip()


def _extract_id(line: str, marker_end: int) -> str:
    remainder = line[marker_end:]
    remainder = remainder.split("|", 1)[0]
    # Fall back to the first word when the model omitted the pipe separator
    reasons = _REASONS_MARKER.search(remainder)
    if reasons:
        remainder = remainder[:reasons.start()]
    for token in remainder.split():
        cleaned = token.strip(_ID_WRAPPING_CHARS)
        if cleaned:
            return cleaned
    return ""


def _extract_reasons(line: str) -> list[str]:
    reasons_match = _REASONS_MARKER.search(line)
    if not reasons_match:
        return []

    segment = line[reasons_match.end():]
    risk_match = _RISK_MARKER.search(segment)
    if risk_match:
        segment = segment[:risk_match.start()]

    segment = segment.strip().rstrip("|").strip()
    reasons = [_clean_token(part) for part in segment.split(",")]
    return [r for r in reasons if r][:MAX_REASONS]


def _extract_risk(line: str) -> str:
    risk_match = _RISK_MARKER.search(line)
    if not risk_match:
        return ""
    return _clean_token(line[risk_match.end():])


def parse_ranked_properties(raw: str, candidates: Sequence[Property]) -> RankedProperties:
    """
    Parse `ID: <id> | Reasons: [r1, r2] | Risk: <text>` lines into ranked picks.

    Only ids present in `candidates` are accepted; each id is accepted once and
    ranks follow line order, capped at MAX_TOP_PICKS. When fewer picks than the
    cap are found the fixed clarifying question is attached.
    """
    by_id = {}
    for candidate in candidates:
        by_id.setdefault(candidate.id, candidate)

    picks: list[RankedProperty] = []
    seen: set[str] = set()
    discarded = 0

    for line in (raw or "").splitlines():
        if len(picks) >= MAX_TOP_PICKS:
            break

        marker = _ID_MARKER.search(line)
        if not marker:
            continue

        property_id = _extract_id(line, marker.end())
        if property_id not in by_id or property_id in seen:
            discarded += 1
            continue

        seen.add(property_id)
        picks.append(RankedProperty(
            id=property_id,
            rank=len(picks) + 1,
            reasons=_extract_reasons(line),
            risk=_extract_risk(line),
            candidate=by_id[property_id],
        ))

    if discarded:
        logger.debug(
            "Discarded ranking lines",
            discarded_lines=discarded,
            accepted_picks=len(picks)
        )

    clarifying_question: Optional[str] = None
    if len(picks) < MAX_TOP_PICKS:
        clarifying_question = CLARIFYING_QUESTION

    return RankedProperties(top_picks=picks, clarifying_question=clarifying_question)


def parse_message_suggestion(raw: str) -> MessageSuggestion:
    """
    Split model output into a rewritten message and follow-up questions.

    The first non-empty line is the rewrite; the first two lines containing a
    question mark are the follow-ups.
    """
    lines = [line.strip() for line in (raw or "").splitlines()]
    non_empty = [line for line in lines if line]

    rewritten = non_empty[0] if non_empty else ""
    questions = [line for line in non_empty if "?" in line][:MAX_FOLLOW_UP_QUESTIONS]

    return MessageSuggestion(rewritten_message=rewritten, follow_up_questions=questions)
