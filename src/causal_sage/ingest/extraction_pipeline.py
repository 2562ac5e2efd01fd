"""
Causal relationship extraction pipeline.
"""
import json
import logging
from typing import Dict, List, Optional, Tuple

from ..entity import VariableCanonicalizer
from ..errors import ParseFailure, SchemaInvalid
from ..extraction import NormalizedOutput, RelationshipNormalizer, load_json
from ..extraction.prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    LOOP_CLOSURE_PROMPT,
    REFORMAT_PROMPT,
)
from ..llm import Embedder, Message, Reasoner
from ..retrieval import SnippetLocator
from ..schema import ExtractionResult, Relationship
from ..verification import PolarityVerifier

logger = logging.getLogger(__name__)


class ExtractionPipeline:
    """Pipeline turning free text into a verified list of causal relationships."""

    def __init__(self, config, reasoner: Reasoner, embedder: Embedder):
        """
        Initialize extraction pipeline.

        Args:
            config: Configuration object
            reasoner: Text generation service
            embedder: Embedding service
        """
        self.config = config
        self.reasoner = reasoner
        self.embedder = embedder
        self.normalizer = RelationshipNormalizer(config)
        self.canonicalizer = VariableCanonicalizer(config, reasoner, embedder, self.normalizer)
        self.verifier = PolarityVerifier(config, reasoner)

    def run(self, text: str, threshold: Optional[float] = None) -> ExtractionResult:
        """
        Run the extraction pipeline.

        Args:
            text: Source text
            threshold: Similarity threshold override for variable merging

        Returns:
            ExtractionResult; empty when the text has no causal relationships

        Raises:
            ParseFailure: Reasoner output could not be parsed
            SchemaInvalid: Output stayed malformed after one reformat request
            MergeFailure: Variable merging returned unusable output
        """
        if not text or not text.strip():
            return ExtractionResult()

        options = self.config.reasoner_options()

        # Step 1: Initial extraction
        logger.info("Extracting causal relationships from %d characters of text", len(text))
        messages = [
            Message(role="system", content=EXTRACTION_SYSTEM_PROMPT),
            Message(role="user", content=text),
        ]
        raw = self.reasoner.complete(messages, options)
        logger.debug("Extraction response: %s", raw)
        parsed, parsed_raw = self._repair(raw, text)
        entries = dict(parsed.entries)

        # Step 2: Loop closure
        if self.config.loop_closure:
            conversation = messages + [
                Message(role="assistant", content=parsed_raw),
                Message(role="user", content=LOOP_CLOSURE_PROMPT),
            ]
            loop_raw = self.reasoner.complete(conversation, options)
            logger.debug("Loop closure response: %s", loop_raw)
            entries = merge_passes(entries, self._loop_closure(loop_raw, text))

        relationships = deduplicate(list(entries.values()))
        if not relationships:
            logger.info("No causal relationships found")
            return ExtractionResult(raw_response=raw)

        # Step 3: Source snippets
        locator = SnippetLocator(self.config, self.embedder, text)
        relationships = [
            rel if rel.source_snippet else rel.model_copy(
                update={"source_snippet": locator.locate(rel.reasoning or rel.text)}
            )
            for rel in relationships
        ]

        # Step 4: Variable canonicalization
        relationships = self.canonicalizer.canonicalize(relationships, text, locator, threshold)

        # Step 5: Polarity verification
        if self.config.verify_polarity:
            relationships = self.verifier.verify_all(relationships)

        result = ExtractionResult(relationships=deduplicate(relationships), raw_response=raw)
        logger.info("Extracted %d causal relationships", len(result.relationships))
        return result

    def _repair(self, raw: str, text: str) -> Tuple[NormalizedOutput, str]:
        """
        Parse the first pass, asking the Reasoner once to reformat malformed output.

        Returns:
            Tuple of (normalized output, the response it was parsed from)
        """
        parsed = load_json(raw)
        if parsed is not None:
            result = self.normalizer.normalize(parsed, text)
            if result.valid:
                return result, raw

        logger.warning("Extraction output malformed; requesting reformat")
        messages = [
            Message(role="system", content=EXTRACTION_SYSTEM_PROMPT),
            Message(role="user", content=REFORMAT_PROMPT.format(previous=json.dumps(raw))),
        ]
        reformatted = self.reasoner.complete(messages, self.config.reasoner_options())
        logger.debug("Reformat response: %s", reformatted)

        parsed = load_json(reformatted)
        if parsed is None:
            raise ParseFailure("reformat", "Reasoner output could not be parsed as JSON after reformat request")
        result = self.normalizer.normalize(parsed, text)
        if not result.valid or result.shape != "structured":
            raise SchemaInvalid(
                "reformat", "Reasoner returned malformed causalRelationships after reformat request"
            )
        return result, reformatted

    def _loop_closure(self, raw: str, text: str) -> NormalizedOutput:
        parsed = load_json(raw)
        if parsed is None:
            raise ParseFailure("loop-closure", "Reasoner output could not be parsed as JSON")
        result = self.normalizer.normalize(parsed, text)
        if not result.valid:
            raise SchemaInvalid("loop-closure", "Reasoner returned malformed loop-closure relationships")
        if result.entries:
            logger.info("Loop closure added %d relationships", len(result.entries))
        return result


def merge_passes(entries: Dict[str, Relationship], extra: NormalizedOutput) -> Dict[str, Relationship]:
    """
    Union of two passes.

    Keyed entries overwrite earlier ones with the same key; array-shaped
    entries are appended under fresh keys.
    """
    merged = dict(entries)
    if extra.shape == "keyed":
        merged.update(extra.entries)
        return merged

    next_key = len(merged) + 1
    for rel in extra.relationships:
        while str(next_key) in merged:
            next_key += 1
        merged[str(next_key)] = rel
    return merged


def deduplicate(relationships: List[Relationship]) -> List[Relationship]:
    """Drop repeated (subject, polarity, object) edges, keeping the first."""
    seen = set()
    unique = []
    for rel in relationships:
        key = rel.edge_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(rel)
    return unique
