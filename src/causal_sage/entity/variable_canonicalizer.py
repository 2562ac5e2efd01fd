"""
Variable canonicalization: merging near-duplicate variable names.
"""
import logging
from typing import Dict, List, Optional, Tuple

import networkx as nx
import numpy as np
from sklearn.preprocessing import normalize

from ..errors import MergeFailure
from ..extraction import RelationshipNormalizer, load_json
from ..extraction.prompts import MERGE_SYSTEM_PROMPT, format_merge_prompt
from ..llm import Embedder, Message, Reasoner, embed_texts
from ..retrieval import SnippetLocator
from ..schema import Relationship

logger = logging.getLogger(__name__)


class VariableCanonicalizer:
    """Groups semantically similar variables and asks the Reasoner to merge them."""

    def __init__(
        self,
        config,
        reasoner: Reasoner,
        embedder: Embedder,
        normalizer: Optional[RelationshipNormalizer] = None,
    ):
        """
        Initialize variable canonicalizer.

        Args:
            config: Configuration object
            reasoner: Reasoner used for the merge request
            embedder: Embedder used for variable names
            normalizer: Normalizer for the merge response
        """
        self.config = config
        self.reasoner = reasoner
        self.embedder = embedder
        self.normalizer = normalizer or RelationshipNormalizer(config)

    def canonicalize(
        self,
        relationships: List[Relationship],
        source_text: str,
        locator: SnippetLocator,
        threshold: Optional[float] = None,
    ) -> List[Relationship]:
        """
        Merge similar variables across a relationship set.

        Args:
            relationships: Relationships to canonicalize
            source_text: Original input text
            locator: Snippet locator for re-attaching source sentences
            threshold: Similarity threshold; defaults to the configured one

        Returns:
            The input list itself when no group reaches the threshold,
            otherwise the Reasoner's merged relationship list

        Raises:
            MergeFailure: If the merge response is unusable
        """
        groups = self.find_groups(relationships, threshold)
        if not groups:
            return relationships

        logger.info("Merging %d similar variable groups: %s", len(groups), groups)
        messages = [
            Message(role="system", content=MERGE_SYSTEM_PROMPT),
            Message(
                role="user",
                content=format_merge_prompt(source_text, [r.text for r in relationships], groups),
            ),
        ]
        raw = self.reasoner.complete(messages, self.config.reasoner_options())
        logger.debug("Merge response: %s", raw)

        parsed = load_json(raw)
        if parsed is None:
            raise MergeFailure("merge", "Reasoner returned no parsable JSON during variable merging")
        merged = self.normalizer.normalize(parsed, source_text)
        if not merged.valid:
            raise MergeFailure("merge", f"Reasoner returned malformed relationships: {raw[:200]!r}")
        if not merged.entries:
            raise MergeFailure("merge", "Reasoner returned no relationships during variable merging")

        return [
            rel.model_copy(update={"source_snippet": locator.locate(rel.reasoning or rel.text)})
            for rel in merged.relationships
        ]

    def find_groups(
        self, relationships: List[Relationship], threshold: Optional[float] = None
    ) -> List[List[str]]:
        """
        Similarity groups among the variables of a relationship set.

        Args:
            relationships: Relationships whose variables are compared
            threshold: Similarity threshold; defaults to the configured one

        Returns:
            Groups of variable names, each with at least two members
        """
        threshold = self.config.similarity_threshold if threshold is None else threshold
        variables = collect_variables(relationships)
        if len(variables) < 2:
            return []

        vectors = embed_texts(
            self.embedder,
            variables,
            model=self.config.embedding_model,
            max_workers=self.config.embedding_max_workers,
        )
        pairs = candidate_pairs(variables, vectors, threshold)
        if not pairs:
            return []

        if self.config.grouping_strategy == "greedy":
            return greedy_groups(pairs)
        return connected_groups(variables, pairs)


def collect_variables(relationships: List[Relationship]) -> List[str]:
    """Distinct variable names in first-appearance order."""
    seen: Dict[str, None] = {}
    for rel in relationships:
        seen.setdefault(rel.subject, None)
        seen.setdefault(rel.object, None)
    return list(seen)


def similarity_matrix(vectors: np.ndarray) -> np.ndarray:
    """
    Pairwise cosine similarity of L2-normalized rows.

    Raises:
        ValueError: If any row has zero magnitude
    """
    vectors = np.asarray(vectors, dtype=float)
    if not np.all(np.linalg.norm(vectors, axis=1) > 0):
        raise ValueError("Zero magnitude vector")
    unit = normalize(vectors, norm="l2")
    return unit @ unit.T


def candidate_pairs(
    variables: List[str], vectors: np.ndarray, threshold: float
) -> List[Tuple[str, str]]:
    """All pairs i < j whose similarity reaches the threshold."""
    sims = similarity_matrix(vectors)
    pairs = []
    for i in range(len(variables)):
        for j in range(i + 1, len(variables)):
            if sims[i, j] >= threshold:
                logger.debug("Similar variables %r ~ %r (%.3f)", variables[i], variables[j], sims[i, j])
                pairs.append((variables[i], variables[j]))
    return pairs


def connected_groups(variables: List[str], pairs: List[Tuple[str, str]]) -> List[List[str]]:
    """Transitive closure of the candidate pairs."""
    order = {name: idx for idx, name in enumerate(variables)}
    graph = nx.Graph()
    graph.add_edges_from(pairs)
    groups = [sorted(component, key=order.__getitem__) for component in nx.connected_components(graph)]
    return sorted(groups, key=lambda g: order[g[0]])


def greedy_groups(pairs: List[Tuple[str, str]]) -> List[List[str]]:
    """
    Single-scan grouping: a pair joins the first group holding either member.

    Order dependent; two groups bridged by a later pair stay separate.
    """
    groups: List[List[str]] = []
    for a, b in pairs:
        for group in groups:
            if a in group or b in group:
                for name in (a, b):
                    if name not in group:
                        group.append(name)
                break
        else:
            groups.append([a, b])

    counts: Dict[str, int] = {}
    for group in groups:
        for name in group:
            counts[name] = counts.get(name, 0) + 1
    shared = [name for name, count in counts.items() if count > 1]
    if shared:
        logger.warning("Greedy grouping placed %s in more than one group", shared)
    return groups
