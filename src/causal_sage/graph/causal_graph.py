"""
Causal graph built from extracted relationships.

Nodes are variable names; each directed edge carries the polarity symbol
of its relationship. Feedback loops are the simple cycles of the graph:
a loop with an even number of negative links is reinforcing, one with an
odd number is balancing.
"""
import logging
from typing import Dict, Iterable, List, Optional

import networkx as nx

from ..schema import FeedbackLoop, Relationship
from ..utils import NEGATIVE_SYMBOL, POSITIVE_SYMBOL, extract_variables

logger = logging.getLogger(__name__)


class CausalGraph:
    """Directed graph of causal links."""

    def __init__(self):
        self.graph = nx.DiGraph()

    @classmethod
    def from_relationships(cls, relationships: Iterable[Relationship]) -> "CausalGraph":
        graph = cls()
        for rel in relationships:
            graph.add_relationship(rel.subject, rel.object, rel.symbol, snippet=rel.source_snippet)
        return graph

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "CausalGraph":
        """
        Build a graph from relationship strings.

        Lines without an arrow or whose endpoints coincide are skipped.

        Args:
            lines: Strings such as "1. death rate -->(-) population"
        """
        graph = cls()
        for line in lines:
            subject, obj, symbol = extract_variables(line)
            if not subject or not obj or subject == obj:
                continue
            graph.add_relationship(subject, obj, symbol or POSITIVE_SYMBOL)
        return graph

    def add_relationship(
        self,
        subject: str,
        obj: str,
        symbol: str = POSITIVE_SYMBOL,
        snippet: Optional[str] = None,
    ):
        """
        Add a causal link.

        Args:
            subject: Cause variable
            obj: Effect variable
            symbol: "(+)" or "(-)"
            snippet: Optional supporting sentence
        """
        if self.graph.has_edge(subject, obj) and self.graph[subject][obj]["symbol"] != symbol:
            logger.warning(
                "Conflicting polarity for %r -> %r; keeping %s",
                subject, obj, self.graph[subject][obj]["symbol"],
            )
            return
        self.graph.add_edge(subject, obj, symbol=symbol, snippet=snippet)

    def variables(self) -> List[str]:
        return list(self.graph.nodes())

    def feedback_loops(self) -> List[FeedbackLoop]:
        """
        All simple cycles, classified as reinforcing or balancing.

        Returns:
            Feedback loops, shortest first
        """
        loops = []
        for cycle in nx.simple_cycles(self.graph):
            edges = zip(cycle, cycle[1:] + cycle[:1])
            negatives = sum(1 for u, v in edges if self.graph[u][v]["symbol"] == NEGATIVE_SYMBOL)
            loops.append(
                FeedbackLoop(
                    variables=list(cycle),
                    loop_type="balancing" if negatives % 2 else "reinforcing",
                    negative_links=negatives,
                )
            )
        return sorted(loops, key=lambda loop: (len(loop.variables), loop.variables))

    def get_stats(self) -> Dict[str, int]:
        """
        Get graph statistics.

        Returns:
            Dictionary with variable, link and loop counts
        """
        loops = self.feedback_loops()
        return {
            "variables": self.graph.number_of_nodes(),
            "links": self.graph.number_of_edges(),
            "reinforcing_loops": sum(1 for l in loops if l.loop_type == "reinforcing"),
            "balancing_loops": sum(1 for l in loops if l.loop_type == "balancing"),
        }
