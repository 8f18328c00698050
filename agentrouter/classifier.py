"""Rule-based task classifier deciding which agent should handle a message."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from agentrouter.patterns import PATTERN_SETS, PatternSet
from agentrouter.schemas import ClassificationDecision, Destination, InternalTaskType

logger = logging.getLogger(__name__)

# Below this score no destination is trusted to route automatically
FALLBACK_THRESHOLD = 0.5
FALLBACK_CONFIDENCE = 0.5

# Accumulated scores top out near 2 with the current tables
CONFIDENCE_SCALE = 2.0

SCORE_PRECISION = 6

# Tie-break order: first destination holding the max score wins
PRIORITY = (Destination.CODEX, Destination.GEMINI, Destination.INTERNAL)


@dataclass(frozen=True)
class ScoreResult:
    """Accumulated score and resolved sub-type for one destination."""

    score: float
    subtype: str


def score(message: str, pattern_set: PatternSet) -> ScoreResult:
    """Score a message against one destination's pattern set.

    Every entry is evaluated; weights of matching entries are summed.
    Refinement rules are checked regardless of which entries matched and
    the last matching rule sets the sub-type.

    Args:
        message: Raw message text
        pattern_set: Pattern set of the destination

    Returns:
        ScoreResult with the accumulated score and sub-type
    """
    text = message.lower()

    total = 0.0
    for entry in pattern_set.entries:
        if entry.matches(text):
            total += entry.weight

    subtype = pattern_set.default_subtype
    for rule in pattern_set.refinements:
        if rule.matches(text):
            subtype = rule.label

    # Rounded so equal sums compare equal in the tie-break
    return ScoreResult(score=round(total, SCORE_PRECISION), subtype=subtype)


def _reasoning(target: Destination, subtype: str) -> str:
    if target == Destination.CODEX:
        return f"Implementation task ({subtype}): delegate to Codex"
    if target == Destination.GEMINI:
        return f"Research task ({subtype}): delegate to Gemini"
    return f"Design or explanation task ({subtype}): handle directly"


def classify(message: str) -> ClassificationDecision:
    """Classify a message into a destination.

    Never raises. Messages that score below the fallback threshold on every
    destination are kept internal with a fixed confidence of 0.5.

    Args:
        message: Free-text task description

    Returns:
        ClassificationDecision for the message
    """
    results = {
        destination: score(message, PATTERN_SETS[destination])
        for destination in PRIORITY
    }
    scores = {destination: result.score for destination, result in results.items()}
    max_score = max(scores.values())

    if max_score < FALLBACK_THRESHOLD:
        decision = ClassificationDecision(
            target=Destination.INTERNAL,
            confidence=FALLBACK_CONFIDENCE,
            reasoning="Task intent is unclear: handle directly",
            suggested_subtype=InternalTaskType.GENERAL.value,
            scores=scores,
        )
        logger.debug(f"Fallback to internal (max score {max_score:.2f})")
        return decision

    target = next(d for d in PRIORITY if scores[d] == max_score)
    winner = results[target]

    decision = ClassificationDecision(
        target=target,
        confidence=min(winner.score / CONFIDENCE_SCALE, 1.0),
        reasoning=_reasoning(target, winner.subtype),
        suggested_subtype=winner.subtype,
        scores=scores,
    )
    logger.debug(
        f"Classified as {target.value} ({winner.subtype}), "
        f"confidence {decision.confidence:.2f}"
    )
    return decision
