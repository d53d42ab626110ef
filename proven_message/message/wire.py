"""
Wire envelopes for moving message records between processes.

Every record is identified by a factory id and a type id so the receiving
side can restore the right record class:

    {"factory_id": 1, "type_id": 3, "data": {...}}
"""

import logging
from typing import Any

from proven_message.exceptions import WireError
from proven_message.message.models import (
    Measurement,
    MessageProperties,
    Metric,
    ProvenMessage,
    QueryFilter,
    Record,
    Statement,
    TimeSeriesQuery,
)
from proven_message.message.response import MessageResponse

logger = logging.getLogger(__name__)

FACTORY_ID = 1

MESSAGE_PROPERTIES_TYPE = 1
MEASUREMENT_TYPE = 2
MESSAGE_TYPE = 3
MESSAGE_RESPONSE_TYPE = 4
METRIC_TYPE = 5
QUERY_FILTER_TYPE = 6
QUERY_TIME_SERIES_TYPE = 7
STATEMENT_TYPE = 8

WIRE_TYPES: dict[int, type[Record]] = {
    MESSAGE_PROPERTIES_TYPE: MessageProperties,
    MEASUREMENT_TYPE: Measurement,
    MESSAGE_TYPE: ProvenMessage,
    MESSAGE_RESPONSE_TYPE: MessageResponse,
    METRIC_TYPE: Metric,
    QUERY_FILTER_TYPE: QueryFilter,
    QUERY_TIME_SERIES_TYPE: TimeSeriesQuery,
    STATEMENT_TYPE: Statement,
}

_TYPE_IDS = {record_class: type_id for type_id, record_class in WIRE_TYPES.items()}


def type_id_of(record: Record) -> int:
    try:
        return _TYPE_IDS[type(record)]
    except KeyError:
        raise WireError(f"No wire type registered for {type(record).__name__}") from None


def encode(record: Record) -> dict[str, Any]:
    """Wrap a record in a JSON-compatible envelope."""
    return {
        "factory_id": FACTORY_ID,
        "type_id": type_id_of(record),
        "data": record.model_dump(mode="json"),
    }


def decode(envelope: dict[str, Any]) -> Record:
    """
    Restore a record from its envelope.

    Args:
        envelope: Mapping produced by encode()

    Returns:
        The record instance

    Raises:
        WireError: unknown factory or type id, or missing data
    """
    factory_id = envelope.get("factory_id")
    if factory_id != FACTORY_ID:
        raise WireError(f"Unknown factory id: {factory_id}")

    type_id = envelope.get("type_id")
    record_class = WIRE_TYPES.get(type_id)
    if record_class is None:
        raise WireError(f"Unknown type id: {type_id}")

    if "data" not in envelope:
        raise WireError(f"Envelope for type {type_id} carries no data")

    logger.debug("Decoding %s envelope", record_class.__name__)
    return record_class.model_validate(envelope["data"])
