"""
Shared fixtures: a small message model on disk and deterministic node IRIs.
"""

import itertools
import json

import pytest
from rdflib import URIRef

from proven_message.builder import MessageBuilder
from proven_message.model.bundle import load_message_model
from proven_message.triples.normalizer import GraphNormalizer
from proven_message.triples.vocabulary import PROVEN_MESSAGE_NS

PM = PROVEN_MESSAGE_NS

CONTEXT = """"@context": {
  "pm": "http://proven.pnnl.gov/proven-message#",
  "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
  "xsd": "http://www.w3.org/2001/XMLSchema#",
  "Measurement": "pm:Measurement",
  "QueryFilter": "pm:QueryFilter",
  "measurements": {"@id": "pm:hasMeasurement", "@container": "@set"},
  "name": "pm:hasName",
  "timestamp": "pm:hasTimestamp",
  "queryType": "pm:hasQueryType",
  "queryMeasurement": "pm:hasQueryMeasurement",
  "queryFilter": {"@id": "pm:hasQueryFilter"}
},"""

ONTOLOGY = {
    "@context": {
        "pm": PM,
        "owl": "http://www.w3.org/2002/07/owl#",
        "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    },
    "@graph": [
        {"@id": "pm:ProvenMessage", "@type": "owl:Class"},
        {"@id": "pm:Measurement", "@type": "owl:Class"},
        {
            "@id": "pm:TimeSeriesData",
            "@type": "owl:Class",
            "rdfs:subClassOf": {"@id": "pm:Measurement"},
        },
    ],
}

SHAPES = {
    "@context": {
        "pm": PM,
        "sh": "http://www.w3.org/ns/shacl#",
        "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    },
    "@graph": [
        {
            "@id": "pm:MeasurementShape",
            "@type": "sh:NodeShape",
            "sh:targetClass": {"@id": "pm:Measurement"},
            "sh:rule": {
                "@type": "sh:TripleRule",
                "sh:subject": {"@id": "sh:this"},
                "sh:predicate": {"@id": "rdf:type"},
                "sh:object": {"@id": "pm:TimeSeriesData"},
            },
        }
    ],
}

REGISTRY = """# test message model
test.context
test.jsonld
test.shapes.jsonld
"""


def write_model(directory, registry=REGISTRY):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "model-files").write_text(registry, encoding="utf-8")
    (directory / "test.context").write_text(CONTEXT, encoding="utf-8")
    (directory / "test.jsonld").write_text(json.dumps(ONTOLOGY), encoding="utf-8")
    (directory / "test.shapes.jsonld").write_text(json.dumps(SHAPES), encoding="utf-8")
    return directory


@pytest.fixture
def model_dir(tmp_path):
    """Temporary model directory with one context, ontology and shapes file."""
    return write_model(tmp_path / "model")


@pytest.fixture
def model_dir_factory(tmp_path):
    """Write a model directory with a custom registry."""
    counter = itertools.count()

    def factory(registry):
        directory = tmp_path / f"model_{next(counter)}"
        return write_model(directory, registry)

    return factory


@pytest.fixture
def model(model_dir):
    return load_message_model(model_dir)


@pytest.fixture
def iri_factory():
    """Deterministic node IRIs: pm:node1, pm:node2, ..."""
    counter = itertools.count(1)
    return lambda: URIRef(f"{PM}node{next(counter)}")


@pytest.fixture
def normalizer(iri_factory):
    return GraphNormalizer(iri_factory=iri_factory)


@pytest.fixture
def builder(model, normalizer):
    return MessageBuilder(model, normalizer=normalizer)
