"""
Triple graph tests: node kinds, wildcard lookup, finalization, equality.
"""

import pytest
from rdflib import BNode, Literal, URIRef

from proven_message.triples.graph import (
    GraphFinalizedError,
    NodeKind,
    TripleGraph,
    local_name,
    node_kind,
)

EX = "http://example.org/"
A, B = URIRef(EX + "a"), URIRef(EX + "b")
P, Q = URIRef(EX + "p"), URIRef(EX + "q")


class TestNodeKind:
    def test_kinds(self):
        assert node_kind(A) is NodeKind.IRI
        assert node_kind(Literal("x")) is NodeKind.LITERAL
        assert node_kind(BNode()) is NodeKind.ANONYMOUS

    def test_unsupported_node(self):
        with pytest.raises(TypeError):
            node_kind("not a node")

    @pytest.mark.parametrize(
        "iri, expected",
        [
            ("http://proven.pnnl.gov/proven-message#hasName", "hasName"),
            ("http://example.org/ns/value", "value"),
            ("urn:sensor", "sensor"),
            ("plain", "plain"),
        ],
    )
    def test_local_name(self, iri, expected):
        assert local_name(iri) == expected


class TestTripleGraph:
    def test_find_with_wildcards(self):
        graph = TripleGraph.from_triples(
            [(A, P, B), (A, Q, Literal("1")), (B, P, Literal("2"))]
        )

        assert len(graph.find(A, None, None)) == 2
        assert len(graph.find(None, P, None)) == 2
        assert graph.find(None, None, B) == [(A, P, B)]
        assert len(graph.find()) == 3

    def test_subjects_deduplicated(self):
        graph = TripleGraph.from_triples([(A, P, Literal("1")), (A, P, Literal("2"))])
        assert graph.subjects(P) == [A]

    def test_duplicates_are_harmless(self):
        graph = TripleGraph.from_triples([(A, P, B), (A, P, B)])
        assert len(graph) == 1

    def test_predicate_must_be_iri(self):
        graph = TripleGraph()
        with pytest.raises(TypeError):
            graph.add((A, Literal("p"), B))

    def test_finalized_graph_rejects_additions(self):
        graph = TripleGraph.from_triples([(A, P, B)]).finalize()
        assert graph.finalized
        with pytest.raises(GraphFinalizedError):
            graph.add((B, P, A))

    def test_anonymous_nodes(self):
        node = BNode()
        graph = TripleGraph.from_triples([(node, P, A), (A, Q, node), (A, P, B)])
        assert graph.anonymous_nodes() == {node}

    def test_union_is_a_new_graph(self):
        left = TripleGraph.from_triples([(A, P, B)])
        right = TripleGraph.from_triples([(B, P, A)])

        merged = left.union(right)

        assert len(merged) == 2
        assert len(left) == 1
        assert (B, P, A) in merged

    def test_triple_set_equality(self):
        left = TripleGraph.from_triples([(A, P, B), (B, Q, Literal("x"))])
        right = TripleGraph.from_triples([(B, Q, Literal("x")), (A, P, B)])
        assert left == right
        assert left != TripleGraph.from_triples([(A, P, B)])

    def test_from_jsonld(self):
        graph = TripleGraph.from_jsonld(
            '{"@context": {"ex": "http://example.org/"}, "@id": "ex:a", "ex:p": "v"}'
        )
        assert graph.find(A, P, None) == [(A, P, Literal("v"))]
