"""
Graph Normalizer - Materializes blank nodes and identifies the message root.

A single forward pass over the parsed message graph:
- Every blank node is replaced by a generated IRI under the Proven message
  namespace (memoized per blank node, so each occurrence maps to one IRI).
- Each generated IRI counts how often it appears in object position.
- The hasQueryType predicate switches the message content to Query.

The root is the single materialized node never used as an object. It is
typed as a ProvenMessage and tagged with the message content.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable

from rdflib import BNode, Literal, URIRef

from proven_message.exceptions import AmbiguousRootError, NoRootError
from proven_message.triples.graph import NodeKind, TripleGraph, node_kind
from proven_message.triples.vocabulary import (
    MESSAGE_CONTENT,
    PROVEN_MESSAGE,
    PROVEN_MESSAGE_NS,
    QUERY_TYPE,
    RDF_TYPE,
    MessageContent,
)

logger = logging.getLogger(__name__)


def new_node_iri() -> URIRef:
    """Fresh globally unique IRI for a materialized blank node."""
    return URIRef(PROVEN_MESSAGE_NS + uuid.uuid4().hex)


@dataclass
class NormalizedGraph:
    """Result of normalization."""

    graph: TripleGraph
    root: URIRef | None
    content: MessageContent
    materialized: dict[BNode, URIRef] = field(default_factory=dict)
    reference_counts: dict[URIRef, int] = field(default_factory=dict)


class GraphNormalizer:
    """
    Replaces blank nodes with stable IRIs and attaches the root declarations.

    A graph without blank nodes is passed through unchanged; its root is the
    node the producer already typed as ProvenMessage, if any. When there is
    none, projection reports the missing root.
    """

    def __init__(self, iri_factory: Callable[[], URIRef] = new_node_iri):
        self.iri_factory = iri_factory

    def normalize(self, graph: TripleGraph) -> NormalizedGraph:
        materialized: dict[BNode, URIRef] = {}
        reference_counts: dict[URIRef, int] = {}
        content = MessageContent.EXPLICIT
        output = TripleGraph()

        def materialize(node: BNode) -> URIRef:
            iri = materialized.get(node)
            if iri is None:
                iri = self.iri_factory()
                materialized[node] = iri
                reference_counts[iri] = 0
                logger.debug("Materialized blank node %s as %s", node, iri)
            return iri

        for subject, predicate, obj in graph:
            if content is MessageContent.EXPLICIT and predicate == QUERY_TYPE:
                content = MessageContent.QUERY

            if node_kind(subject) is NodeKind.ANONYMOUS:
                subject = materialize(subject)

            if node_kind(obj) is NodeKind.ANONYMOUS:
                obj = materialize(obj)
                reference_counts[obj] += 1

            output.add((subject, predicate, obj))

        root = self._resolve_root(output, reference_counts)
        if root is not None and materialized:
            output.add((root, RDF_TYPE, PROVEN_MESSAGE))
        if root is not None and not output.find(root, MESSAGE_CONTENT, None):
            output.add((root, MESSAGE_CONTENT, Literal(content.value)))

        logger.info(
            "Normalized %d triples: %d blank nodes materialized, root=%s, content=%s",
            len(output),
            len(materialized),
            root,
            content.value,
        )

        return NormalizedGraph(
            graph=output,
            root=root,
            content=content,
            materialized=materialized,
            reference_counts=reference_counts,
        )

    def _resolve_root(
        self, graph: TripleGraph, reference_counts: dict[URIRef, int]
    ) -> URIRef | None:
        unreferenced = [iri for iri, count in reference_counts.items() if count == 0]
        if len(unreferenced) > 1:
            raise AmbiguousRootError(
                "Message graph has more than one unreferenced node", [str(i) for i in unreferenced]
            )
        if len(unreferenced) == 1:
            logger.debug("Found root node %s", unreferenced[0])
            return unreferenced[0]

        # Producer supplied its own root IRI
        declared = graph.subjects(RDF_TYPE, PROVEN_MESSAGE)
        if len(declared) > 1:
            raise AmbiguousRootError(
                "Message graph declares more than one ProvenMessage", [str(d) for d in declared]
            )
        if declared:
            return declared[0]
        if reference_counts:
            raise NoRootError("Message root object not found")
        return None


def normalize_graph(graph: TripleGraph) -> NormalizedGraph:
    """Quick function to normalize a graph with default IRI generation."""
    return GraphNormalizer().normalize(graph)
