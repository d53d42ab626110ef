"""
Proven message records.

Immutable pydantic models for the values produced by a message build. They
are the shapes exchanged with other processes (see wire.py).
"""

import time
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator
from rdflib import Literal, URIRef
from rdflib.namespace import RDF, XSD

from proven_message.exceptions import FragmentDescriptorError
from proven_message.triples.vocabulary import DEFAULT_MEASUREMENT, MessageContent

MESSAGE_KEY_DELIMITER = "^||^"



def _now_millis() -> int:
    return int(time.time() * 1000)


class Record(BaseModel):
    """Base for all frozen message records."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# STATEMENTS
# =============================================================================


class ObjectKind(str, Enum):
    LITERAL = "Literal"
    URI = "URI"


def literal_datatype(literal: Literal) -> URIRef:
    """Datatype of a literal with RDF 1.1 defaults: xsd:string, or rdf:langString when tagged."""
    if literal.language:
        return RDF.langString
    if literal.datatype is None:
        return XSD.string
    return literal.datatype


def literal_value(literal: Literal) -> str:
    """
    Render a literal as ``lex^^datatype``, or ``lex@lang^^rdf:langString``
    for language-tagged literals.

    The datatype is always written, so the last ``^^`` separates it from the
    lexical form whatever the lexical form contains.
    """
    lexical = str(literal)
    datatype = literal_datatype(literal)
    if literal.language:
        lexical = f"{lexical}@{literal.language}"
    return f"{lexical}^^{datatype}"


def parse_literal_value(value: str) -> Literal:
    """Inverse of literal_value."""
    lexical, separator, datatype = value.rpartition("^^")
    if not separator:
        raise ValueError(f"Literal value has no datatype: {value!r}")
    if datatype == str(RDF.langString):
        lexical, _, language = lexical.rpartition("@")
        return Literal(lexical, lang=language)
    if datatype == str(XSD.string):
        return Literal(lexical)
    return Literal(lexical, datatype=URIRef(datatype))


class Statement(Record):
    """A single (subject, predicate, object) statement of a message."""

    subject: str
    predicate: str
    object_value: str
    object_kind: ObjectKind

    def to_triple(self) -> tuple[URIRef, URIRef, URIRef | Literal]:
        if self.object_kind is ObjectKind.URI:
            obj = URIRef(self.object_value)
        else:
            obj = parse_literal_value(self.object_value)
        return URIRef(self.subject), URIRef(self.predicate), obj


# =============================================================================
# MEASUREMENTS
# =============================================================================


class MetricValueType(str, Enum):
    """Value types of a metric."""

    STRING = "String"
    INTEGER = "Integer"
    LONG = "Long"
    BOOLEAN = "Boolean"
    DATE_TIME = "DateTime"
    TIMESTAMP = "Timestamp"
    HOST_NAME = "HostName"
    HOST_FQDN = "HostFqdn"
    APPLICATION_NAME = "ApplicationName"
    APPLICATION_VERSION = "ApplicationVersion"
    PROCESS_ID = "ProcessId"
    FLOAT = "Float"
    DOUBLE = "Double"

    @classmethod
    def parse(cls, token: str) -> "MetricValueType":
        """Case and underscore insensitive lookup (Integer, INTEGER, date_time, ...)."""
        key = token.replace("_", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise FragmentDescriptorError(f"Unknown metric value type '{token}'")


class Metric(Record):
    """One time-series value or tag of a measurement."""

    label: str
    value: str
    is_metadata: bool
    value_type: MetricValueType = MetricValueType.STRING


class Measurement(Record):
    """A single time-series data point."""

    name: str = DEFAULT_MEASUREMENT
    timestamp: int | None = Field(default=None, description="Epoch milliseconds")
    metrics: frozenset[Metric] = Field(default_factory=frozenset)
    message_iri: str
    measurement_iri: str


# =============================================================================
# QUERIES
# =============================================================================


class QueryFilter(Record):
    field: str
    value: str
    datatype_name: str


class TimeSeriesQuery(Record):
    """Time-series query over one measurement, always filtered."""

    message_iri: str
    measurement_name: str = DEFAULT_MEASUREMENT
    filters: tuple[QueryFilter, ...] = Field(min_length=1)


# =============================================================================
# MESSAGE
# =============================================================================


class MessageProperties(Record):
    created: int = Field(default_factory=_now_millis, description="Epoch milliseconds")


class ProvenMessage(Record):
    """
    A built Proven message.

    Carries measurements for Explicit content or a time-series query for
    Query content, never both.
    """

    id: UUID
    raw_text: str
    content: MessageContent
    name: str | None = None
    domain: str | None = None
    is_transient: bool = False
    is_static: bool = False
    source: str | None = None
    keywords: tuple[str, ...] = ()
    properties: MessageProperties = Field(default_factory=MessageProperties)
    statements: tuple[Statement, ...] = ()
    measurements: tuple[Measurement, ...] | None = None
    query: TimeSeriesQuery | None = None

    @model_validator(mode="after")
    def _check_content(self) -> "ProvenMessage":
        if self.content is MessageContent.EXPLICIT and self.query is not None:
            raise ValueError("Explicit messages cannot carry a time-series query")
        if self.content is MessageContent.QUERY and self.measurements is not None:
            raise ValueError("Query messages cannot carry measurements")
        return self

    @property
    def message_key(self) -> str:
        """Key identifying the message in the memory grid."""
        parts = [
            str(self.id),
            self.domain or "",
            self.name or "",
            self.source or "",
            str(self.properties.created),
        ]
        return MESSAGE_KEY_DELIMITER.join(parts)
