"""
Message Projector - Extracts typed views from an enriched message graph.

Three independent, read-only projections:
- statements:   every triple as a Statement
- measurements: Measurement nodes with their metrics, name and timestamp
- query:        the time-series query built from the QueryFilter node

Each projection either fully succeeds or raises its own ProjectionError,
chaining the underlying cause.
"""

import logging
from datetime import datetime, timezone

from rdflib import URIRef

from proven_message.exceptions import (
    AmbiguousRootError,
    GraphStructureError,
    MeasurementsProjectionError,
    MissingRootError,
    ProjectionError,
    QueryProjectionError,
    StatementsProjectionError,
    UnfilteredQueryError,
)
from proven_message.message.codec import decode_metric, is_long
from proven_message.message.models import (
    Measurement,
    ObjectKind,
    QueryFilter,
    Statement,
    TimeSeriesQuery,
    literal_datatype,
    literal_value,
)
from proven_message.triples.graph import NodeKind, TripleGraph, local_name, node_kind
from proven_message.triples.vocabulary import (
    DATE_FORMATS,
    DEFAULT_MEASUREMENT,
    MEASUREMENT,
    NAME,
    PROVEN_MESSAGE,
    QUERY_FILTER,
    QUERY_MEASUREMENT,
    RDF_TYPE,
    TIMESTAMP,
)

logger = logging.getLogger(__name__)


# =============================================================================
# HELPERS
# =============================================================================


def find_message_root(graph: TripleGraph) -> URIRef:
    """Subject of the single (?, rdf:type, ProvenMessage) triple."""
    roots = graph.subjects(RDF_TYPE, PROVEN_MESSAGE)
    if not roots:
        raise MissingRootError("Missing ProvenMessage concept in message graph")
    if len(roots) > 1:
        raise AmbiguousRootError(
            "Message graph has more than one ProvenMessage concept", [str(r) for r in roots]
        )
    root = roots[0]
    if node_kind(root) is not NodeKind.IRI:
        raise MissingRootError(f"ProvenMessage concept is not an IRI: {root!r}")
    return root


def convert_datetime_str(value: str) -> int | None:
    """
    Parse a date/time string into epoch milliseconds (UTC).

    Tries each of DATE_FORMATS in order; returns None and logs a warning if
    none match.
    """
    for date_format in DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, date_format).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
        return int(parsed.timestamp() * 1000)

    logger.warning("Invalid date time string provided in message: %s", value)
    return None


def parse_timestamp(value: str) -> int | None:
    """
    Epoch milliseconds from a signed 64-bit integer string, falling back to
    the date formats. Surrounding whitespace is not accepted.
    """
    if is_long(value):
        return int(value)
    return convert_datetime_str(value)


def datatype_name(datatype: str) -> str:
    """Type name after the last '::' or, failing that, the last '#'."""
    for separator in ("::", "#"):
        if separator in datatype:
            name = datatype.rsplit(separator, 1)[1]
            if name:
                return name
    raise ValueError(f"Cannot derive a datatype name from '{datatype}'")


# =============================================================================
# MESSAGE PROJECTOR
# =============================================================================


class MessageProjector:
    """Read-only projections over one enriched message graph."""

    def __init__(self, graph: TripleGraph):
        self.graph = graph

    def statements(self) -> list[Statement]:
        """
        Convert every triple into a Statement.

        Returns:
            Statements, one per triple

        Raises:
            StatementsProjectionError: if a blank node or unsupported node remains
        """
        try:
            return [self._statement(triple) for triple in self.graph]
        except (ProjectionError, GraphStructureError):
            raise
        except Exception as e:
            raise StatementsProjectionError(f"Failed to convert to proven statements ({e})") from e

    def _statement(self, triple) -> Statement:
        subject, predicate, obj = triple
        if node_kind(subject) is not NodeKind.IRI:
            raise StatementsProjectionError(f"Statement subject is not an IRI: {subject!r}")

        kind = node_kind(obj)
        if kind is NodeKind.IRI:
            return Statement(
                subject=str(subject),
                predicate=str(predicate),
                object_value=str(obj),
                object_kind=ObjectKind.URI,
            )
        if kind is NodeKind.LITERAL:
            return Statement(
                subject=str(subject),
                predicate=str(predicate),
                object_value=literal_value(obj),
                object_kind=ObjectKind.LITERAL,
            )
        raise StatementsProjectionError(
            f"Statement object is a blank node: ({subject}, {predicate}, {obj!r})"
        )

    def measurements(self) -> list[Measurement]:
        """
        Extract every Measurement node with its metrics, name and timestamp.

        Raises:
            MeasurementsProjectionError: on a missing root or malformed metric
        """
        try:
            root = find_message_root(self.graph)
            measurements = [
                self._measurement(root, node)
                for node in self.graph.subjects(RDF_TYPE, MEASUREMENT)
            ]
        except (ProjectionError, GraphStructureError):
            raise
        except Exception as e:
            raise MeasurementsProjectionError(
                f"Failed to convert proven measurements ({e})"
            ) from e

        logger.info("Projected %d measurements", len(measurements))
        return measurements

    def _measurement(self, root: URIRef, node: URIRef) -> Measurement:
        if node_kind(node) is not NodeKind.IRI:
            raise MeasurementsProjectionError(f"Measurement node is not an IRI: {node!r}")

        name = DEFAULT_MEASUREMENT
        timestamp = None
        metrics = set()

        for _, predicate, obj in self.graph.find(node, None, None):
            if node_kind(obj) is not NodeKind.LITERAL:
                continue

            metric = decode_metric(predicate, obj)
            if metric is not None:
                metrics.add(metric)

            if predicate == NAME:
                name = str(obj)
            elif predicate == TIMESTAMP:
                timestamp = parse_timestamp(str(obj))

        return Measurement(
            name=name,
            timestamp=timestamp,
            metrics=frozenset(metrics),
            message_iri=str(root),
            measurement_iri=str(node),
        )

    def query(self) -> TimeSeriesQuery:
        """
        Build the time-series query of a Query message.

        Raises:
            UnfilteredQueryError: if the query carries no filters
            QueryProjectionError: on any other extraction failure
        """
        try:
            root = find_message_root(self.graph)
            measurement_name = self._query_measurement(root)
            filter_node = self._query_filter_node()
            filters = self._query_filters(filter_node) if filter_node is not None else []
            if not filters:
                raise UnfilteredQueryError(str(filter_node) if filter_node else None)
        except (ProjectionError, GraphStructureError):
            raise
        except Exception as e:
            raise QueryProjectionError(f"Failed to convert to proven query ({e})") from e

        logger.info("Projected query on '%s' with %d filters", measurement_name, len(filters))
        return TimeSeriesQuery(
            message_iri=str(root),
            measurement_name=measurement_name,
            filters=tuple(filters),
        )

    def _query_measurement(self, root: URIRef) -> str:
        names = {
            str(obj)
            for _, _, obj in self.graph.find(root, QUERY_MEASUREMENT, None)
            if node_kind(obj) is NodeKind.LITERAL
        }
        if len(names) > 1:
            raise QueryProjectionError(f"Query names more than one measurement: {sorted(names)}")
        return names.pop() if names else DEFAULT_MEASUREMENT

    def _query_filter_node(self) -> URIRef | None:
        nodes = self.graph.subjects(RDF_TYPE, QUERY_FILTER)
        if len(nodes) > 1:
            raise QueryProjectionError(
                f"Query has more than one QueryFilter node: {sorted(str(n) for n in nodes)}"
            )
        return nodes[0] if nodes else None

    def _query_filters(self, node: URIRef) -> list[QueryFilter]:
        filters = []
        for _, predicate, obj in self.graph.find(node, None, None):
            if node_kind(obj) is not NodeKind.LITERAL:
                continue
            filters.append(
                QueryFilter(
                    field=local_name(str(predicate)),
                    value=str(obj),
                    datatype_name=datatype_name(str(literal_datatype(obj))),
                )
            )
        return sorted(filters, key=lambda f: (f.field, f.value, f.datatype_name))


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def project_statements(graph: TripleGraph) -> list[Statement]:
    return MessageProjector(graph).statements()


def project_measurements(graph: TripleGraph) -> list[Measurement]:
    return MessageProjector(graph).measurements()


def project_query(graph: TripleGraph) -> TimeSeriesQuery:
    return MessageProjector(graph).query()
