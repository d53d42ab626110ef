"""
Message Module - Typed views of a message graph.

Components:
- models.py: immutable records
- codec.py: metric fragment descriptors
- projector.py: statements, measurements and query projections
- response.py / wire.py: records exchanged with other processes
"""

from .codec import decode_metric, derive_value_type
from .models import (
    Measurement,
    Metric,
    MetricValueType,
    ProvenMessage,
    QueryFilter,
    Statement,
    TimeSeriesQuery,
)
from .projector import MessageProjector, project_measurements, project_query, project_statements
from .response import MessageResponse, response_for, response_for_error

__all__ = [
    # Records
    "ProvenMessage",
    "Statement",
    "Measurement",
    "Metric",
    "MetricValueType",
    "QueryFilter",
    "TimeSeriesQuery",
    "MessageResponse",
    # Codec
    "decode_metric",
    "derive_value_type",
    # Projector
    "MessageProjector",
    "project_statements",
    "project_measurements",
    "project_query",
    # Responses
    "response_for",
    "response_for_error",
]
