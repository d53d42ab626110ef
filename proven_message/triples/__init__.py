"""
Triples Module - Message graph handling.

Components:
- vocabulary.py: reserved Proven message IRIs
- graph.py: TripleGraph and node kinds
- normalizer.py: blank node materialization and root detection
- rules.py: SHACL rule enrichment
- serializer.py: graph dumps for inspection
"""

from .graph import NodeKind, TripleGraph, node_kind
from .normalizer import GraphNormalizer, NormalizedGraph, normalize_graph
from .rules import NoRules, RulesApplicator
from .serializer import graph_statistics, serialize_graph

__all__ = [
    # Graph
    "TripleGraph",
    "NodeKind",
    "node_kind",
    # Normalizer
    "GraphNormalizer",
    "NormalizedGraph",
    "normalize_graph",
    # Rules
    "RulesApplicator",
    "NoRules",
    # Serializer
    "serialize_graph",
    "graph_statistics",
]
