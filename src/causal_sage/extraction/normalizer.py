"""
Normalization of heterogeneous Reasoner output into Relationship records.

Reasoners return relationships in several shapes. Each shape has one rule;
rules are tried in order and the first one that recognizes the structure
produces the canonical records.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..schema import Polarity, Relationship
from ..utils import ARROW, extract_variables, humanize, normalize_variable

logger = logging.getLogger(__name__)

ALLOWED_PREDICATES = {p.value for p in Polarity}
RELATIONSHIP_KEYS = ("causal relationship", "relationship", "causal_relationship")
CAUSE_EFFECT_KEYS = ("cause", "effect", "sign", "direction")
FINAL_LIST_KEYS = ("final relationships", "final_relationships", "finalrelationships")


@dataclass
class NormalizedOutput:
    """Relationships recognized in one Reasoner response."""
    entries: Dict[str, Relationship] = field(default_factory=dict)
    valid: bool = True
    shape: str = "unknown"

    @property
    def relationships(self) -> List[Relationship]:
        return list(self.entries.values())


class RelationshipNormalizer:
    """Converts repaired Reasoner output into canonical relationships."""

    def __init__(self, config=None):
        """
        Initialize normalizer.

        Args:
            config: Configuration object
        """
        self.config = config
        self.rules: List[Callable[[Any, Optional[str]], Optional[NormalizedOutput]]] = [
            self._empty_list_rule,
            self._structured_rule,
            self._final_list_rule,
            self._keyed_rule,
            self._cause_effect_rule,
            self._string_list_rule,
        ]

    def normalize(self, data: Any, source_text: Optional[str] = None) -> NormalizedOutput:
        """
        Normalize a parsed structure.

        Args:
            data: Output of load_json
            source_text: Original input text, used to vet supplied snippets

        Returns:
            NormalizedOutput; `valid` is False when the structure is malformed
            or matches no known shape
        """
        for rule in self.rules:
            result = rule(data, source_text)
            if result is not None:
                logger.debug(
                    "Matched %s shape: %d relationships, valid=%s",
                    result.shape, len(result.entries), result.valid,
                )
                return result
        logger.debug("No relationship shape matched %r", type(data).__name__)
        return NormalizedOutput(valid=False)

    def _empty_list_rule(self, data: Any, source_text: Optional[str]) -> Optional[NormalizedOutput]:
        """[] is a valid answer with no relationships."""
        if isinstance(data, list) and not data:
            return NormalizedOutput(shape="array")
        return None

    def _structured_rule(self, data: Any, source_text: Optional[str]) -> Optional[NormalizedOutput]:
        """{"causalRelationships": [{subject, predicate, object, ...}]}"""
        if not isinstance(data, dict) or not isinstance(data.get("causalRelationships"), list):
            return None

        result = NormalizedOutput(shape="structured")
        for idx, entry in enumerate(data["causalRelationships"]):
            if not isinstance(entry, dict):
                result.valid = False
                continue
            subject = str(entry.get("subject") or "").strip()
            obj = str(entry.get("object") or "").strip()
            predicate = str(entry.get("predicate") or "").strip().lower()
            if not subject or not obj or predicate not in ALLOWED_PREDICATES:
                result.valid = False
                continue
            relationship = self._build(
                humanize(subject),
                Polarity(predicate),
                humanize(obj),
                entry,
                source_text,
            )
            if relationship is not None:
                result.entries[str(idx + 1)] = relationship
        return result

    def _keyed_rule(self, data: Any, source_text: Optional[str]) -> Optional[NormalizedOutput]:
        """{"1": {"causal relationship": "a -->(+) b", "reasoning": ...}, ...}"""
        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            return None

        result = NormalizedOutput(shape="keyed")
        for key, entry in data.items():
            line = _relationship_line(entry)
            if line is None:
                result.valid = False
                continue
            subject, obj, symbol = extract_variables(line)
            relationship = self._build(subject, Polarity.from_symbol(symbol), obj, entry, source_text)
            if relationship is not None:
                result.entries[str(key)] = relationship
        return result

    def _cause_effect_rule(self, data: Any, source_text: Optional[str]) -> Optional[NormalizedOutput]:
        """Any top-level array of {cause, effect, sign|direction} objects."""
        entries = _find_list(data, _looks_like_cause_effect)
        if entries is None:
            return None

        result = NormalizedOutput(shape="cause_effect")
        for idx, entry in enumerate(entries):
            if not isinstance(entry, dict):
                result.valid = False
                continue
            cause = str(entry.get("cause") or entry.get("variable1") or "").strip()
            effect = str(entry.get("effect") or entry.get("variable2") or "").strip()
            if not cause or not effect:
                result.valid = False
                continue
            sign = entry.get("sign") or entry.get("direction") or entry.get("relationship") or ""
            relationship = self._build(
                humanize(cause),
                _polarity_from_word(str(sign)),
                humanize(effect),
                entry,
                source_text,
            )
            if relationship is not None:
                result.entries[str(idx + 1)] = relationship
        return result

    def _final_list_rule(self, data: Any, source_text: Optional[str]) -> Optional[NormalizedOutput]:
        """{"Step 2": {"Final Relationships": [...]}} or a top-level "Final Relationships" list."""
        items = _find_final_list(data)
        if items is None:
            return None
        return self._relationship_items(items, source_text, "final")

    def _string_list_rule(self, data: Any, source_text: Optional[str]) -> Optional[NormalizedOutput]:
        """["a -->(+) b", ...] or [{"relationship": "a -->(+) b"}, ...], bare or under any top-level key."""
        items = _find_list(data, _looks_like_relationship_items)
        if items is None:
            return None
        return self._relationship_items(items, source_text, "strings")

    def _relationship_items(self, items: List[Any], source_text: Optional[str], shape: str) -> NormalizedOutput:
        result = NormalizedOutput(shape=shape)
        for idx, item in enumerate(items):
            entry = item if isinstance(item, dict) else {}
            line = _relationship_line(item) if isinstance(item, dict) else item
            if not _is_relationship_line(line):
                result.valid = False
                continue
            subject, obj, symbol = extract_variables(line)
            relationship = self._build(subject, Polarity.from_symbol(symbol), obj, entry, source_text)
            if relationship is not None:
                result.entries[str(idx + 1)] = relationship
        return result

    def _build(
        self,
        subject: str,
        predicate: Optional[Polarity],
        obj: str,
        entry: Dict[str, Any],
        source_text: Optional[str],
    ) -> Optional[Relationship]:
        """Create a Relationship, dropping empty or self-referencing edges."""
        subject = normalize_variable(subject)
        obj = normalize_variable(obj)
        if not subject or not obj or subject == obj:
            logger.debug("Dropping degenerate relationship %r -> %r", subject, obj)
            return None

        reasoning = entry.get("reasoning")
        snippet = entry.get("relevant text") or entry.get("relevant_text")
        if snippet and source_text is not None and str(snippet).strip().lower() not in source_text.lower():
            # not a quote from the input; the snippet locator supplies one later
            snippet = None

        return Relationship(
            subject=subject,
            predicate=predicate,
            object=obj,
            reasoning=str(reasoning) if reasoning else None,
            source_snippet=str(snippet).strip() if snippet else None,
        )


def _relationship_line(entry: Dict[str, Any]) -> Optional[str]:
    for key in RELATIONSHIP_KEYS:
        value = entry.get(key)
        if value:
            return value if _is_relationship_line(value) else None
    return None


def _is_relationship_line(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    parts = value.split(ARROW, 1)
    if len(parts) < 2:
        return False
    subject, obj, _ = extract_variables(value)
    return bool(subject and obj)


def _looks_like_cause_effect(values: List[Any]) -> bool:
    first = values[0]
    return isinstance(first, dict) and any(first.get(k) for k in CAUSE_EFFECT_KEYS)


def _looks_like_relationship_items(values: List[Any]) -> bool:
    lines = []
    for value in values:
        if isinstance(value, str):
            lines.append(value)
        elif isinstance(value, dict) and any(key in value for key in RELATIONSHIP_KEYS):
            lines.append(str(_first_relationship_value(value)))
        else:
            return False
    return any(ARROW in line for line in lines)


def _first_relationship_value(entry: Dict[str, Any]) -> Any:
    for key in RELATIONSHIP_KEYS:
        if entry.get(key):
            return entry[key]
    return ""


def _find_final_list(data: Any) -> Optional[List[Any]]:
    """A "Final Relationships" list at the top level or one level down."""
    if not isinstance(data, dict):
        return None
    containers = [data] + [v for v in data.values() if isinstance(v, dict)]
    for container in containers:
        for key, value in container.items():
            if isinstance(value, list) and str(key).strip().lower() in FINAL_LIST_KEYS:
                return value
    return None


def _find_list(data: Any, predicate: Callable[[List[Any]], bool]) -> Optional[List[Any]]:
    """The data itself, or the first top-level value, that is a matching list."""
    candidates = [data] if isinstance(data, list) else []
    if isinstance(data, dict):
        candidates.extend(v for v in data.values() if isinstance(v, list))
    for candidate in candidates:
        if candidate and predicate(candidate):
            return candidate
    return None


def _polarity_from_word(word: str) -> Optional[Polarity]:
    lowered = word.strip().lower()
    if "increase" in lowered or "positive" in lowered or lowered == "+":
        return Polarity.POSITIVE
    if "decrease" in lowered or "negative" in lowered or lowered == "-":
        return Polarity.NEGATIVE
    return None
