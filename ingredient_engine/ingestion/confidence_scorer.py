"""Confidence scoring for one extracted line.

The score is a pure function of four yes/no signals. Rows are checked in
order and the first match wins:

    quantity              unit  distinct name  ambiguous  score
    yes (non-ambiguous)   yes   yes            no         1.0
    yes (non-ambiguous)   no    yes            no         0.7
    yes                   any   no             yes        0.6
    no                    no    yes            no         0.5
    no                    no    no             -          0.0
    anything else                                         0.3
"""
from dataclasses import dataclass

FULL_CONFIDENCE = 1.0
NO_UNIT_CONFIDENCE = 0.7
AMBIGUOUS_CONFIDENCE = 0.6
NAME_ONLY_CONFIDENCE = 0.5
EMPTY_CONFIDENCE = 0.0
FALLBACK_CONFIDENCE = 0.3


@dataclass(frozen=True)
class ConfidenceSignals:
    """What was recognized on a line."""

    quantity_recognized: bool
    unit_recognized: bool
    distinct_name: bool
    is_ambiguous: bool


def score_confidence(
    quantity_recognized: bool,
    unit_recognized: bool,
    distinct_name: bool,
    is_ambiguous: bool,
) -> float:
    """Score a line from its four extraction signals.

    Never raises; the same inputs always give the same score.
    """
    if quantity_recognized and not is_ambiguous and distinct_name:
        if unit_recognized:
            return FULL_CONFIDENCE
        return NO_UNIT_CONFIDENCE
    if quantity_recognized and is_ambiguous and not distinct_name:
        return AMBIGUOUS_CONFIDENCE
    if not quantity_recognized and not unit_recognized:
        if distinct_name and not is_ambiguous:
            return NAME_ONLY_CONFIDENCE
        if not distinct_name:
            return EMPTY_CONFIDENCE
    return FALLBACK_CONFIDENCE


def score_signals(signals: ConfidenceSignals) -> float:
    return score_confidence(
        signals.quantity_recognized,
        signals.unit_recognized,
        signals.distinct_name,
        signals.is_ambiguous,
    )
