"""
Independent verification of relationship polarity.

The Reasoner picks among four statements about the relationship:
  1. increasing subject increases object   -> positive
  2. decreasing subject decreases object   -> positive
  3. increasing subject decreases object   -> negative
  4. decreasing subject increases object   -> negative
A positive-implying choice wins over a negative one. When the answer
carries no option numbers, a lexical heuristic decides, and when that is
inconclusive the polarity defaults to positive.
"""
import logging
import re
from typing import List, Optional, Tuple

from ..extraction import load_json
from ..extraction.prompts import (
    VERIFICATION_SYSTEM_PROMPT,
    VERIFICATION_USER_PROMPT,
    format_verification_context,
)
from ..llm import Message, Reasoner
from ..schema import Polarity, Relationship

logger = logging.getLogger(__name__)

POSITIVE_OPTIONS = {"1", "2"}
NEGATIVE_OPTIONS = {"3", "4"}

# stems; any word starting with one counts
POSITIVE_STEMS = [
    "increas", "rise", "rising", "rose", "risen", "rais", "higher",
    "more", "boost", "improv", "grow", "grew", "expand",
]
NEGATIVE_STEMS = [
    "decreas", "drop", "fall", "lower", "reduc", "declin",
    "shrink", "shrank", "diminish", "fewer",
]

_OPTION_LIST = re.compile(r"\[?\s*([1-4](?:\s*,\s*[1-4])*)\s*\]?")
_OPTION_DIGIT = re.compile(r"[1-4]")
_POSITIVE_PATTERN = re.compile(r"\b(?:%s)\w*" % "|".join(POSITIVE_STEMS))
_NEGATIVE_PATTERN = re.compile(r"\b(?:%s)\w*" % "|".join(NEGATIVE_STEMS))


class PolarityVerifier:
    """Forces every relationship to a definite positive/negative polarity."""

    def __init__(self, config, reasoner: Reasoner):
        """
        Initialize polarity verifier.

        Args:
            config: Configuration object
            reasoner: Reasoner answering the multiple-choice query
        """
        self.config = config
        self.reasoner = reasoner

    def verify(self, relationship: Relationship) -> Relationship:
        """
        Verify one relationship.

        Args:
            relationship: Relationship with any (or no) predicate

        Returns:
            Copy of the relationship with predicate positive or negative
        """
        messages = [
            Message(
                role="system",
                content=VERIFICATION_SYSTEM_PROMPT.format(
                    subject=relationship.subject, object=relationship.object
                ),
            ),
            Message(
                role="user",
                content=VERIFICATION_USER_PROMPT.format(
                    relationship=relationship.text,
                    context=format_verification_context(
                        relationship.reasoning, relationship.source_snippet
                    ),
                ),
            ),
        ]
        raw = self.reasoner.complete(messages, self.config.reasoner_options())
        logger.debug("Verification response for %r: %s", relationship.text, raw)

        polarity, method = resolve_polarity(raw, relationship)
        if relationship.predicate is not None and relationship.predicate.resolved() is not polarity:
            logger.info(
                "Polarity of %r corrected to %s (%s)", relationship.text, polarity.value, method
            )
        return relationship.model_copy(update={"predicate": polarity})

    def verify_all(self, relationships: List[Relationship]) -> List[Relationship]:
        return [self.verify(rel) for rel in relationships]


def resolve_polarity(raw: str, relationship: Relationship) -> Tuple[Polarity, str]:
    """
    Decide a polarity from a verification response.

    Args:
        raw: Raw Reasoner response
        relationship: Relationship under verification

    Returns:
        Tuple of (polarity, method), method being one of
        "answers", "digits", "lexical" or "default"
    """
    options = _parse_answers(raw)
    method = "answers"
    if options is None:
        options = scan_option_digits(raw or "")
        method = "digits"

    polarity = polarity_from_options(options)
    if polarity is not None:
        if method == "digits":
            logger.warning("Verification answer was not JSON; read options %s from text", options)
        return polarity, method

    context = " ".join(
        part for part in (relationship.reasoning, relationship.source_snippet, relationship.text) if part
    )
    polarity = lexical_polarity(context)
    if polarity is not None:
        logger.warning("No option chosen for %r; lexical heuristic gives %s", relationship.text, polarity.value)
        return polarity, "lexical"

    logger.warning("No polarity signal for %r; defaulting to positive", relationship.text)
    return Polarity.POSITIVE, "default"


def _parse_answers(raw: str) -> Optional[List[str]]:
    parsed = load_json(raw)
    if not isinstance(parsed, dict) or not parsed.get("answers"):
        return None
    return _OPTION_DIGIT.findall(str(parsed["answers"]))


def scan_option_digits(text: str) -> List[str]:
    """Option numbers 1-4 mentioned anywhere in free text."""
    match = _OPTION_LIST.search(text)
    if match and match.group(1):
        return _OPTION_DIGIT.findall(match.group(1))
    return _OPTION_DIGIT.findall(text)


def polarity_from_options(options: List[str]) -> Optional[Polarity]:
    chosen = set(options)
    if chosen & POSITIVE_OPTIONS:
        return Polarity.POSITIVE
    if chosen & NEGATIVE_OPTIONS:
        return Polarity.NEGATIVE
    return None


def lexical_polarity(text: str) -> Optional[Polarity]:
    """Positive or negative when exactly one class of polarity words occurs."""
    lowered = text.lower()
    positive = bool(_POSITIVE_PATTERN.search(lowered))
    negative = bool(_NEGATIVE_PATTERN.search(lowered))
    if positive and not negative:
        return Polarity.POSITIVE
    if negative and not positive:
        return Polarity.NEGATIVE
    return None
