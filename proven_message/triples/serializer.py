"""
Graph Serializer - Renders message graphs for inspection.

Supports Turtle, JSON-LD, N-Triples, and RDF/XML output.
"""

import logging
from collections import Counter
from typing import Any

from proven_message.triples.graph import NodeKind, TripleGraph, node_kind

logger = logging.getLogger(__name__)


# =============================================================================
# SUPPORTED FORMATS
# =============================================================================

FORMATS = {
    "turtle": "turtle",
    "ttl": "turtle",
    "json-ld": "json-ld",
    "jsonld": "json-ld",
    "nt": "nt",
    "ntriples": "nt",
    "xml": "xml",
    "rdf": "xml",
}


def serialize_graph(graph: TripleGraph, format: str = "turtle") -> str:
    """
    Serialize a message graph.

    Args:
        graph: Graph to serialize
        format: Output format (turtle, json-ld, nt, xml)

    Returns:
        Serialized graph text
    """
    rdf_format = FORMATS.get(format.lower())
    if rdf_format is None:
        raise ValueError(f"Unsupported format: {format}. Supported: {list(FORMATS.keys())}")

    logger.debug("Serializing %d triples as %s", len(graph), rdf_format)
    return graph.rdf.serialize(format=rdf_format)


def graph_statistics(graph: TripleGraph) -> dict[str, Any]:
    """
    Get statistics about a message graph.

    Args:
        graph: Graph to analyze

    Returns:
        Dictionary with triple, subject, predicate and anonymous node counts
    """
    predicates = Counter()
    subjects = set()
    literals = 0

    for s, p, o in graph:
        predicates[str(p)] += 1
        subjects.add(s)
        if node_kind(o) is NodeKind.LITERAL:
            literals += 1

    return {
        "total_triples": len(graph),
        "unique_subjects": len(subjects),
        "unique_predicates": len(predicates),
        "literal_objects": literals,
        "anonymous_nodes": len(graph.anonymous_nodes()),
        "predicates": dict(predicates.most_common(20)),
    }
