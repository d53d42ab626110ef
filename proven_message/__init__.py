"""
Proven message - Builds typed Proven messages from JSON-LD documents.

Components:
- model: message model bundle (context, ontology, SHACL shapes)
- triples: triple graph, blank node normalization, SHACL rules
- message: records, fragment codec, projections, wire envelopes
- builder.py: stage orchestration
"""

__version__ = "0.1.0"

from .builder import BuildTrace, MessageBuilder, build_message
from .exceptions import MessageBuildError, ProvenMessageError
from .message.models import ProvenMessage
from .model.bundle import MessageModel, load_message_model

__all__ = [
    "__version__",
    # Builder
    "MessageBuilder",
    "BuildTrace",
    "build_message",
    # Model
    "MessageModel",
    "load_message_model",
    # Records
    "ProvenMessage",
    # Errors
    "ProvenMessageError",
    "MessageBuildError",
]
