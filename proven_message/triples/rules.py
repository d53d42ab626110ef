"""
Rules Applicator - Enriches a normalized message graph with SHACL rule results.

SHACL Advanced Features rules (sh:rule) from the message model shapes are
executed with pyshacl. The result is the union of the input graph and every
triple the rules inferred. Validation results are only reported in the log;
they never fail a build.
"""

import logging

import pyshacl
from rdflib import Graph, Namespace
from rdflib.namespace import RDF

from proven_message.triples.graph import TripleGraph

logger = logging.getLogger(__name__)

SH = Namespace("http://www.w3.org/ns/shacl#")


class RulesApplicator:
    """
    Applies the shapes graph's SHACL rules to a message graph.

    The shapes graph is shared read-only between builds; each call works on
    its own copy of the data graph.
    """

    def __init__(self, shapes: Graph, iterate_rules: bool = False):
        """
        Initialize the applicator.

        Args:
            shapes: SHACL shapes graph holding sh:rule definitions
            iterate_rules: Re-run rules until no new triples are inferred
        """
        self.shapes = shapes
        self.iterate_rules = iterate_rules

    def apply(self, graph: TripleGraph) -> TripleGraph:
        """
        Run the rules against a graph.

        Args:
            graph: Normalized message graph

        Returns:
            New graph holding the input triples plus inferred triples
        """
        working = Graph()
        for triple in graph:
            working.add(triple)

        conforms, results_graph, _ = pyshacl.validate(
            data_graph=working,
            shacl_graph=self.shapes,
            inference="none",
            advanced=True,
            inplace=True,
            iterate_rules=self.iterate_rules,
            abort_on_first=False,
            allow_infos=True,
            allow_warnings=True,
        )

        inferred = Graph()
        for triple in working:
            if triple not in graph:
                inferred.add(triple)

        logger.info("SHACL rules inferred %d triples", len(inferred))
        self._report(conforms, results_graph)
        return graph.union(inferred)

    def _report(self, conforms: bool, results_graph: Graph) -> None:
        if conforms:
            logger.debug("SHACL validation: CONFORMS")
            return

        for report in results_graph.subjects(RDF.type, SH.ValidationResult):
            message = results_graph.value(report, SH.resultMessage)
            focus = results_graph.value(report, SH.focusNode)
            logger.warning("SHACL: %s (node: %s)", message, focus)


class NoRules:
    """Stand-in used when rule processing is disabled in configuration."""

    def apply(self, graph: TripleGraph) -> TripleGraph:
        logger.debug("Rule processing disabled, graph passed through")
        return graph
