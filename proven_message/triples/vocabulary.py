"""
Reserved Proven message vocabulary.

These IRIs are shared with upstream message producers and downstream
time-series consumers and must match byte-for-byte.
"""

from enum import Enum

from rdflib import Namespace, URIRef
from rdflib.namespace import RDF

# =============================================================================
# NAMESPACE DEFINITIONS
# =============================================================================

# Proven message namespace, also used for materialized blank node IRIs
PROVEN_MESSAGE_NS = "http://proven.pnnl.gov/proven-message#"
PM = Namespace(PROVEN_MESSAGE_NS)


# =============================================================================
# CLASSES
# =============================================================================

PROVEN_MESSAGE = URIRef(PROVEN_MESSAGE_NS + "ProvenMessage")
MEASUREMENT = URIRef(PROVEN_MESSAGE_NS + "Measurement")
QUERY_FILTER = URIRef(PROVEN_MESSAGE_NS + "QueryFilter")

# Literal datatypes carrying a metric fragment descriptor
TIME_SERIES_FIELD = URIRef(PROVEN_MESSAGE_NS + "TimeSeriesField")
TIME_SERIES_TAG = URIRef(PROVEN_MESSAGE_NS + "TimeSeriesTag")


# =============================================================================
# PROPERTIES
# =============================================================================

RDF_TYPE = RDF.type
QUERY_TYPE = URIRef(PROVEN_MESSAGE_NS + "hasQueryType")
MESSAGE_CONTENT = URIRef(PROVEN_MESSAGE_NS + "hasMessageContent")
NAME = URIRef(PROVEN_MESSAGE_NS + "hasName")
TIMESTAMP = URIRef(PROVEN_MESSAGE_NS + "hasTimestamp")
QUERY_MEASUREMENT = URIRef(PROVEN_MESSAGE_NS + "hasQueryMeasurement")


# =============================================================================
# MESSAGE CONTENT
# =============================================================================


class MessageContent(str, Enum):
    """Content classification of a message graph (hasMessageContent literal)."""

    EXPLICIT = "Explicit"
    QUERY = "Query"


# =============================================================================
# MISC CONSTANTS
# =============================================================================

DEFAULT_MEASUREMENT = "PROVEN_MEASUREMENT"

# strptime equivalents of yyyy-MM-dd'T'HH:mm:ss.SSS'Z' and yyyy-MM-dd HH:mm:ss.SSSSSS,
# tried in this order
DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%d %H:%M:%S.%f",
)
