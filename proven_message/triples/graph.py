"""
Triple Graph - In-memory triple collection used by the message pipeline.

Thin wrapper over an rdflib Graph that adds:
- A closed node variant (IRI, literal, anonymous) with exhaustive dispatch
- Wildcard triple lookup
- Append-only semantics until the graph is finalized
- Triple-set equality
"""

import logging
from enum import Enum
from typing import Iterator

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.namespace import XSD
from rdflib.term import Node

logger = logging.getLogger(__name__)

Triple = tuple[Node, Node, Node]


# =============================================================================
# NODE VARIANT
# =============================================================================


class NodeKind(str, Enum):
    """Kinds of node that may appear in a message graph."""

    IRI = "IRI"
    LITERAL = "Literal"
    ANONYMOUS = "Anonymous"


def node_kind(node: Node) -> NodeKind:
    """Classify an rdflib term; anything else is rejected."""
    if isinstance(node, BNode):
        return NodeKind.ANONYMOUS
    if isinstance(node, URIRef):
        return NodeKind.IRI
    if isinstance(node, Literal):
        return NodeKind.LITERAL
    raise TypeError(f"Unsupported graph node {node!r} ({type(node).__name__})")


def is_anonymous(node: Node) -> bool:
    return node_kind(node) is NodeKind.ANONYMOUS


def simple_literal(node: Node) -> Node:
    """xsd:string literals as simple literals (the same RDF 1.1 term)."""
    if isinstance(node, Literal) and node.datatype == XSD.string:
        return Literal(str(node))
    return node


def local_name(iri: str) -> str:
    """Return the local part of an IRI (after the last '#', '/' or ':')."""
    for separator in ("#", "/", ":"):
        if separator in iri:
            candidate = iri.rsplit(separator, 1)[1]
            if candidate:
                return candidate
    return iri


# =============================================================================
# TRIPLE GRAPH
# =============================================================================


class GraphFinalizedError(RuntimeError):
    """Raised when adding to a graph that has been finalized."""


class TripleGraph:
    """
    Queryable set of (subject, predicate, object) triples.

    Owned by a single message build; not safe to share between concurrent
    builds while it is still being populated.
    """

    def __init__(self, graph: Graph | None = None):
        self._graph = graph if graph is not None else Graph()
        self._finalized = False

    @classmethod
    def from_jsonld(cls, text: str) -> "TripleGraph":
        """Parse a JSON-LD document into a new graph."""
        graph = Graph()
        graph.parse(data=text, format="json-ld")
        logger.debug("Parsed %d triples from JSON-LD", len(graph))
        return cls.from_triples(graph)

    @classmethod
    def from_triples(cls, triples) -> "TripleGraph":
        result = cls()
        for triple in triples:
            result.add(triple)
        return result

    @property
    def rdf(self) -> Graph:
        """Underlying rdflib graph (read access for external engines)."""
        return self._graph

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add(self, triple: Triple) -> None:
        if self._finalized:
            raise GraphFinalizedError("Cannot add triples to a finalized graph")
        subject, predicate, obj = triple
        if node_kind(predicate) is not NodeKind.IRI:
            raise TypeError(f"Predicate must be an IRI, got {predicate!r}")
        node_kind(subject)
        node_kind(obj)
        self._graph.add((subject, predicate, simple_literal(obj)))

    def finalize(self) -> "TripleGraph":
        self._finalized = True
        return self

    def find(
        self,
        subject: Node | None = None,
        predicate: Node | None = None,
        obj: Node | None = None,
    ) -> list[Triple]:
        """All triples matching the pattern; None is a wildcard."""
        return list(self._graph.triples((subject, predicate, obj)))

    def subjects(self, predicate: Node | None = None, obj: Node | None = None) -> list[Node]:
        return list(dict.fromkeys(s for s, _, _ in self.find(None, predicate, obj)))

    def anonymous_nodes(self) -> set[BNode]:
        nodes = set()
        for s, _, o in self._graph:
            if is_anonymous(s):
                nodes.add(s)
            if is_anonymous(o):
                nodes.add(o)
        return nodes

    def union(self, other: "TripleGraph | Graph") -> "TripleGraph":
        """New graph holding the triples of both graphs."""
        other_graph = other.rdf if isinstance(other, TripleGraph) else other
        merged = Graph()
        for triple in self._graph:
            merged.add(triple)
        for triple in other_graph:
            merged.add(triple)
        return TripleGraph(merged)

    def triple_set(self) -> set[Triple]:
        return set(self._graph)

    def __iter__(self) -> Iterator[Triple]:
        return iter(self._graph)

    def __len__(self) -> int:
        return len(self._graph)

    def __contains__(self, triple: Triple) -> bool:
        return triple in self._graph

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TripleGraph):
            return self.triple_set() == other.triple_set()
        return NotImplemented

    def __repr__(self) -> str:
        state = "finalized" if self._finalized else "open"
        return f"<TripleGraph {len(self)} triples, {state}>"
