"""
Fragment Type Codec - Decodes metric descriptors carried in literal datatypes.

A literal becomes a metric when its datatype IRI starts with one of the
time-series kind IRIs (TimeSeriesField / TimeSeriesTag). The datatype's
fragment then reads:

    <kind>[:<label>][::<value-type>]

e.g. ``...#TimeSeriesField:val::Integer`` (``TimeSeriesField:val:Integer`` is
read the same way). Missing or empty parts fall back
to defaults: kind -> tag (metadata), label -> predicate local name,
value type -> String. A value type of ``Derive`` is resolved from the
literal's lexical form.
"""

import logging
import math
import re

from rdflib import Literal, URIRef

from proven_message.exceptions import FragmentDescriptorError
from proven_message.message.models import Metric, MetricValueType
from proven_message.triples.graph import local_name
from proven_message.triples.vocabulary import TIME_SERIES_FIELD, TIME_SERIES_TAG

logger = logging.getLogger(__name__)

DERIVE = "derive"
FIELD_KIND = local_name(str(TIME_SERIES_FIELD))

INT_MIN, INT_MAX = -(2**31), 2**31 - 1
LONG_MIN, LONG_MAX = -(2**63), 2**63 - 1
FLOAT_MAX = 3.4028234663852886e38

_INTEGRAL = re.compile(r"[+-]?\d+")
_NON_FINITE = re.compile(r"[+-]?(?:Infinity|NaN)")


# =============================================================================
# VALUE TYPE DERIVATION
# =============================================================================


def _is_integer(value: str) -> bool:
    return bool(_INTEGRAL.fullmatch(value)) and INT_MIN <= int(value) <= INT_MAX


def is_long(value: str) -> bool:
    """True for a plain integral string within the signed 64-bit range."""
    return bool(_INTEGRAL.fullmatch(value)) and LONG_MIN <= int(value) <= LONG_MAX


def _as_float(value: str) -> float | None:
    text = value.strip()
    if "_" in text:
        return None
    if _NON_FINITE.fullmatch(text):
        return float(text)
    # float() also takes inf, nan and infinity in any case
    if text.lstrip("+-")[:3].lower() in ("inf", "nan"):
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _is_float(value: str) -> bool:
    number = _as_float(value)
    return number is not None and (not math.isfinite(number) or abs(number) <= FLOAT_MAX)


def _is_double(value: str) -> bool:
    return _as_float(value) is not None


def _is_boolean(value: str) -> bool:
    return value.strip().lower() in ("true", "false")


# Order matters: integral strings must classify as Integer before Float
DERIVE_ORDER = (
    (MetricValueType.INTEGER, _is_integer),
    (MetricValueType.LONG, is_long),
    (MetricValueType.FLOAT, _is_float),
    (MetricValueType.DOUBLE, _is_double),
    (MetricValueType.BOOLEAN, _is_boolean),
)


def derive_value_type(value: str) -> MetricValueType:
    """Probe a lexical value for the narrowest matching value type."""
    for value_type, probe in DERIVE_ORDER:
        if probe(value):
            return value_type
    return MetricValueType.STRING


# =============================================================================
# FRAGMENT DECODING
# =============================================================================


def is_metric_datatype(datatype: str | None) -> bool:
    if not datatype:
        return False
    return datatype.startswith(str(TIME_SERIES_FIELD)) or datatype.startswith(
        str(TIME_SERIES_TAG)
    )


def parse_fragment(datatype: str) -> tuple[str, str, str]:
    """
    Split a descriptor fragment into (kind, label, value type) tokens.

    Both ``kind:label::Type`` and the positional ``kind:label:Type`` forms
    are accepted; any further colon-separated token is rejected.
    """
    fragment = datatype.split("#", 1)[1] if "#" in datatype else local_name(datatype)
    head, separator, value_type = fragment.partition("::")
    tokens = head.split(":")

    if len(tokens) == 3 and not separator:
        value_type = tokens.pop()
    if len(tokens) > 2 or "::" in value_type:
        raise FragmentDescriptorError(f"Malformed metric descriptor '{fragment}' in {datatype}")

    kind = tokens[0]
    label = tokens[1] if len(tokens) > 1 else ""
    return kind.strip(), label.strip(), value_type.strip()


def decode_metric(predicate: URIRef, literal: Literal) -> Metric | None:
    """
    Build a Metric from a literal triple, or None when the literal's datatype
    does not carry a metric descriptor.

    Args:
        predicate: Predicate of the triple (default label source)
        literal: Object literal of the triple

    Returns:
        Metric, or None for ordinary literals
    """
    datatype = str(literal.datatype) if literal.datatype is not None else None
    if not is_metric_datatype(datatype):
        return None

    kind, label, value_type_token = parse_fragment(datatype)
    value = str(literal)

    if not value_type_token:
        value_type = MetricValueType.STRING
    elif value_type_token.lower() == DERIVE:
        value_type = derive_value_type(value)
    else:
        value_type = MetricValueType.parse(value_type_token)

    metric = Metric(
        label=label or local_name(str(predicate)),
        value=value,
        is_metadata=kind != FIELD_KIND,
        value_type=value_type,
    )
    logger.debug("Decoded metric %s from %s", metric, datatype)
    return metric
