"""
Graph normalization tests: blank node materialization and root detection.
"""

import pytest
from rdflib import BNode, Literal, URIRef

from proven_message.exceptions import AmbiguousRootError, NoRootError
from proven_message.triples.graph import TripleGraph
from proven_message.triples.normalizer import GraphNormalizer, new_node_iri
from proven_message.triples.vocabulary import (
    MEASUREMENT,
    MESSAGE_CONTENT,
    NAME,
    PROVEN_MESSAGE,
    PROVEN_MESSAGE_NS,
    QUERY_TYPE,
    RDF_TYPE,
    MessageContent,
)

HAS_MEASUREMENT = URIRef(PROVEN_MESSAGE_NS + "hasMeasurement")


class TestMaterialization:
    def test_no_anonymous_nodes_remain(self, normalizer):
        root, child = BNode(), BNode()
        graph = TripleGraph.from_triples(
            [(root, HAS_MEASUREMENT, child), (child, RDF_TYPE, MEASUREMENT)]
        )

        result = normalizer.normalize(graph)

        assert result.graph.anonymous_nodes() == set()
        assert set(result.materialized) == {root, child}

    def test_memoized_per_blank_node(self, normalizer):
        node = BNode()
        graph = TripleGraph.from_triples(
            [(node, RDF_TYPE, MEASUREMENT), (node, NAME, Literal("m1"))]
        )

        result = normalizer.normalize(graph)

        iri = result.materialized[node]
        assert len(result.graph.find(iri, None, None)) == 4  # type, name, root type, content
        assert result.root == iri

    def test_reference_counts_only_count_objects(self, normalizer):
        root, child = BNode(), BNode()
        graph = TripleGraph.from_triples(
            [
                (root, HAS_MEASUREMENT, child),
                (child, RDF_TYPE, MEASUREMENT),
                (child, NAME, Literal("m1")),
            ]
        )

        result = normalizer.normalize(graph)

        assert result.reference_counts[result.materialized[root]] == 0
        assert result.reference_counts[result.materialized[child]] == 1

    def test_untouched_triples_are_kept(self, normalizer):
        node = BNode()
        iri = URIRef("http://example.org/sensor")
        graph = TripleGraph.from_triples([(node, NAME, Literal("m1")), (iri, NAME, Literal("s"))])

        result = normalizer.normalize(graph)

        assert (iri, NAME, Literal("s")) in result.graph

    def test_generated_iris_are_unique(self):
        assert new_node_iri() != new_node_iri()
        assert str(new_node_iri()).startswith(PROVEN_MESSAGE_NS)


class TestRoot:
    def test_root_gets_type_and_content(self, normalizer):
        root, child = BNode(), BNode()
        graph = TripleGraph.from_triples(
            [(root, HAS_MEASUREMENT, child), (child, RDF_TYPE, MEASUREMENT)]
        )

        result = normalizer.normalize(graph)

        root_iri = result.materialized[root]
        assert result.root == root_iri
        assert (root_iri, RDF_TYPE, PROVEN_MESSAGE) in result.graph
        assert (root_iri, MESSAGE_CONTENT, Literal("Explicit")) in result.graph
        assert result.content is MessageContent.EXPLICIT

    def test_two_unreferenced_nodes_are_ambiguous(self, normalizer):
        graph = TripleGraph.from_triples(
            [(BNode(), NAME, Literal("a")), (BNode(), NAME, Literal("b"))]
        )

        with pytest.raises(AmbiguousRootError) as excinfo:
            normalizer.normalize(graph)
        assert len(excinfo.value.candidates) == 2

    def test_cycle_has_no_root(self, normalizer):
        a, b = BNode(), BNode()
        graph = TripleGraph.from_triples([(a, HAS_MEASUREMENT, b), (b, HAS_MEASUREMENT, a)])

        with pytest.raises(NoRootError, match="Message root object not found"):
            normalizer.normalize(graph)

    def test_graph_without_anonymous_nodes_passes_through(self, normalizer):
        sensor = URIRef("http://example.org/sensor")
        graph = TripleGraph.from_triples([(sensor, NAME, Literal("s"))])

        result = normalizer.normalize(graph)

        assert result.root is None
        assert result.graph == graph

    def test_declared_root_is_kept(self, normalizer):
        message = URIRef("http://example.org/message")
        graph = TripleGraph.from_triples(
            [(message, RDF_TYPE, PROVEN_MESSAGE), (message, NAME, Literal("m"))]
        )

        result = normalizer.normalize(graph)

        assert result.root == message
        assert (message, MESSAGE_CONTENT, Literal("Explicit")) in result.graph

    def test_query_type_switches_content(self, normalizer):
        node = BNode()
        graph = TripleGraph.from_triples(
            [(node, QUERY_TYPE, Literal("TimeSeries")), (node, NAME, Literal("q"))]
        )

        result = normalizer.normalize(graph)

        assert result.content is MessageContent.QUERY
        assert (result.root, MESSAGE_CONTENT, Literal("Query")) in result.graph


class TestIdempotence:
    def test_second_pass_changes_nothing(self, iri_factory):
        root, child = BNode(), BNode()
        graph = TripleGraph.from_triples(
            [
                (root, HAS_MEASUREMENT, child),
                (child, RDF_TYPE, MEASUREMENT),
                (child, NAME, Literal("m1")),
            ]
        )
        normalizer = GraphNormalizer(iri_factory=iri_factory)

        first = normalizer.normalize(graph)
        second = normalizer.normalize(first.graph)

        assert second.materialized == {}
        assert second.root == first.root
        assert second.graph == first.graph
