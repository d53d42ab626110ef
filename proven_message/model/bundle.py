"""
Message Model - JSON-LD context, ontology and SHACL shapes used to build messages.

The model is loaded once, from a registry file listing the model resources,
and then shared read-only by every message build.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rdflib import Graph

from proven_message.exceptions import (
    MessageModelError,
    MissingContextError,
    MissingOntologyError,
    MissingShapesError,
    MultipleContextError,
)
from proven_message.model.files import MODEL_REGISTRY_FILE, MessageModelFile

logger = logging.getLogger(__name__)

DEFAULT_MODEL_DIR = Path(__file__).resolve().parent.parent / "message_model"


@dataclass(frozen=True)
class MessageModel:
    """Loaded message model bundle."""

    context: str
    ontology: Graph
    shapes: Graph
    resources: dict[str, MessageModelFile] = field(default_factory=dict)

    def prepend_context(self, message: str) -> str:
        return prepend_context(message, self.context)


def prepend_context(message: str, context: str) -> str:
    """
    Insert the JSON-LD context right after the first '{' of a JSON message,
    turning plain JSON into JSON-LD.

    Args:
        message: JSON message text
        context: Context member text, e.g. ``"@context": {...}``

    Returns:
        The message with the context member prepended
    """
    head, brace, body = message.partition("{")
    if not brace:
        return message

    member = context.strip().rstrip(",")
    if not member:
        return message
    separator = "," if not body.lstrip().startswith("}") else ""
    return f"{head}{{{member}{separator}{body}"


def read_registry(model_dir: Path, registry_file: str) -> list[str]:
    registry_path = model_dir / registry_file
    try:
        lines = registry_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise MessageModelError(f"Failed to read model registry {registry_path}: {e}") from e

    names = []
    for line in lines:
        name = line.strip()
        if name and not name.startswith("#"):
            names.append(name)
    return names


def _parse_jsonld(path: Path) -> Graph:
    graph = Graph()
    try:
        graph.parse(data=path.read_text(encoding="utf-8"), format="json-ld")
    except Exception as e:
        raise MessageModelError(f"Failed to parse model file {path}: {e}") from e
    return graph


def load_message_model(
    model_dir: Path | str | None = None, registry_file: str = MODEL_REGISTRY_FILE
) -> MessageModel:
    """
    Load the message model listed in a registry file.

    Args:
        model_dir: Directory holding the registry and model files
            (defaults to the packaged model)
        registry_file: Registry file name inside model_dir

    Returns:
        MessageModel

    Raises:
        MissingContextError, MultipleContextError, MissingOntologyError,
        MissingShapesError: registry cardinality violations
        MessageModelError: unreadable registry or model file
    """
    model_dir = Path(model_dir) if model_dir is not None else DEFAULT_MODEL_DIR
    registry = str(model_dir / registry_file)
    logger.debug("Loading message model from %s", registry)

    resources: dict[str, MessageModelFile] = {}
    for name in read_registry(model_dir, registry_file):
        kind = MessageModelFile.file_type(name)
        if kind is None:
            logger.warning("Ignoring unrecognized model file %s", name)
            continue
        resources[name] = kind

    contexts = [n for n, k in resources.items() if k is MessageModelFile.CONTEXT]
    ontologies = [n for n, k in resources.items() if k is MessageModelFile.ONTOLOGY]
    shapes_files = [n for n, k in resources.items() if k is MessageModelFile.SHAPES]

    if not contexts:
        raise MissingContextError(registry)
    if len(contexts) > 1:
        raise MultipleContextError(registry, contexts)
    if not ontologies:
        raise MissingOntologyError(registry)
    if not shapes_files:
        raise MissingShapesError(registry)

    context_path = model_dir / contexts[0]
    try:
        context = context_path.read_text(encoding="utf-8")
    except OSError as e:
        raise MessageModelError(f"Failed to load model file {context_path}: {e}") from e

    ontology = Graph()
    for name in ontologies:
        ontology += _parse_jsonld(model_dir / name)

    shapes = Graph()
    for name in shapes_files:
        shapes += _parse_jsonld(model_dir / name)

    logger.info(
        "Loaded message model: %d ontology triples, %d shapes triples (%d files)",
        len(ontology),
        len(shapes),
        len(resources),
    )
    return MessageModel(context=context, ontology=ontology, shapes=shapes, resources=resources)
