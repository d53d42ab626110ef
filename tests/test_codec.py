"""
Fragment descriptor decoding tests.
"""

import pytest
from rdflib import Literal, URIRef
from rdflib.namespace import XSD

from proven_message.exceptions import FragmentDescriptorError
from proven_message.message.codec import (
    decode_metric,
    derive_value_type,
    is_metric_datatype,
    parse_fragment,
)
from proven_message.message.models import Metric, MetricValueType
from proven_message.triples.vocabulary import PROVEN_MESSAGE_NS, TIME_SERIES_FIELD, TIME_SERIES_TAG

PREDICATE = URIRef("http://example.org/sensor#voltage")


def typed(value, fragment):
    return Literal(value, datatype=URIRef(PROVEN_MESSAGE_NS + fragment))


class TestDeriveValueType:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("42", MetricValueType.INTEGER),
            ("-7", MetricValueType.INTEGER),
            ("4294967296", MetricValueType.LONG),
            ("42.5", MetricValueType.FLOAT),
            ("1e39", MetricValueType.DOUBLE),
            ("true", MetricValueType.BOOLEAN),
            ("FALSE", MetricValueType.BOOLEAN),
            ("hello", MetricValueType.STRING),
            ("", MetricValueType.STRING),
        ],
    )
    def test_priority_order(self, value, expected):
        assert derive_value_type(value) is expected

    def test_integral_string_is_integer_not_float(self):
        assert derive_value_type("100") is MetricValueType.INTEGER

    @pytest.mark.parametrize("value", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_spellings(self, value):
        assert derive_value_type(value) is MetricValueType.FLOAT

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan", "infinity", "INF", "1_000"])
    def test_other_non_finite_spellings_are_strings(self, value):
        assert derive_value_type(value) is MetricValueType.STRING

    def test_positional_value_type_decodes(self):
        metric = decode_metric(PREDICATE, typed("7", "TimeSeriesField:val:Integer"))
        assert metric.label == "val"
        assert metric.value_type is MetricValueType.INTEGER


class TestFragmentParsing:
    def test_metric_datatypes(self):
        assert is_metric_datatype(str(TIME_SERIES_FIELD))
        assert is_metric_datatype(str(TIME_SERIES_TAG) + ":site")
        assert not is_metric_datatype(str(XSD.string))
        assert not is_metric_datatype(None)

    def test_full_fragment(self):
        assert parse_fragment(PROVEN_MESSAGE_NS + "TimeSeriesField:val::Integer") == (
            "TimeSeriesField",
            "val",
            "Integer",
        )

    def test_value_type_without_label(self):
        assert parse_fragment(PROVEN_MESSAGE_NS + "TimeSeriesField::Derive") == (
            "TimeSeriesField",
            "",
            "Derive",
        )

    def test_positional_value_type(self):
        assert parse_fragment(PROVEN_MESSAGE_NS + "TimeSeriesField:val:Integer") == (
            "TimeSeriesField",
            "val",
            "Integer",
        )

    @pytest.mark.parametrize(
        "fragment",
        ["TimeSeriesField:a:b:c", "TimeSeriesField:a:b::Integer", "TimeSeriesField:a::b::c"],
    )
    def test_extra_tokens_are_rejected(self, fragment):
        with pytest.raises(FragmentDescriptorError):
            parse_fragment(PROVEN_MESSAGE_NS + fragment)


class TestDecodeMetric:
    def test_field_defaults(self):
        metric = decode_metric(PREDICATE, Literal("3.3", datatype=TIME_SERIES_FIELD))
        assert metric == Metric(
            label="voltage",
            value="3.3",
            is_metadata=False,
            value_type=MetricValueType.STRING,
        )

    def test_tag_is_metadata(self):
        metric = decode_metric(PREDICATE, typed("north", "TimeSeriesTag:site"))
        assert metric.is_metadata
        assert metric.label == "site"

    def test_explicit_value_type(self):
        metric = decode_metric(PREDICATE, typed("7", "TimeSeriesField:val::Integer"))
        assert metric.label == "val"
        assert metric.value_type is MetricValueType.INTEGER
        assert not metric.is_metadata

    def test_derived_value_type(self):
        metric = decode_metric(PREDICATE, typed("42.5", "TimeSeriesField::Derive"))
        assert metric.label == "voltage"
        assert metric.value_type is MetricValueType.FLOAT

    def test_value_type_token_is_case_insensitive(self):
        metric = decode_metric(PREDICATE, typed("1", "TimeSeriesField:n::process_id"))
        assert metric.value_type is MetricValueType.PROCESS_ID

    def test_unknown_value_type(self):
        with pytest.raises(FragmentDescriptorError):
            decode_metric(PREDICATE, typed("1", "TimeSeriesField:n::Decimal"))

    def test_ordinary_literals_are_not_metrics(self):
        assert decode_metric(PREDICATE, Literal("1000")) is None
        assert decode_metric(PREDICATE, Literal(5)) is None
