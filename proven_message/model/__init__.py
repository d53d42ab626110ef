"""
Model Module - Message model bundle loading.
"""

from .bundle import DEFAULT_MODEL_DIR, MessageModel, load_message_model, prepend_context
from .files import MODEL_REGISTRY_FILE, MessageModelFile

__all__ = [
    "DEFAULT_MODEL_DIR",
    "MODEL_REGISTRY_FILE",
    "MessageModel",
    "MessageModelFile",
    "load_message_model",
    "prepend_context",
]
