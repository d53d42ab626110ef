"""
Error taxonomy for Proven message construction.

- Configuration errors: the message model bundle could not be loaded.
- Structural errors: the message graph has no (or more than one) root.
- Projection errors: a typed view could not be extracted from the graph.
- Build errors: wrap whichever stage failed while building one message.

None of these are transient; callers should not retry.
"""


class ProvenMessageError(Exception):
    """Base class for all message library errors."""


# =============================================================================
# CONFIGURATION
# =============================================================================


class MessageModelError(ProvenMessageError):
    """The message model bundle could not be loaded."""


class MissingContextError(MessageModelError):
    def __init__(self, registry: str):
        super().__init__(f"No JSON-LD context file listed in model registry {registry}")


class MultipleContextError(MessageModelError):
    def __init__(self, registry: str, names: list[str]):
        super().__init__(
            f"Multiple JSON-LD context files listed in model registry {registry}: {names}"
        )
        self.names = names


class MissingOntologyError(MessageModelError):
    def __init__(self, registry: str):
        super().__init__(f"No ontology file listed in model registry {registry}")


class MissingShapesError(MessageModelError):
    def __init__(self, registry: str):
        super().__init__(f"No SHACL shapes file listed in model registry {registry}")


# =============================================================================
# GRAPH STRUCTURE
# =============================================================================


class GraphStructureError(ProvenMessageError):
    """The message graph does not have the expected root structure."""


class NoRootError(GraphStructureError):
    """No node in the message graph qualifies as the message root."""


class AmbiguousRootError(GraphStructureError):
    """More than one node in the message graph qualifies as the message root."""

    def __init__(self, message: str, candidates: list[str]):
        super().__init__(f"{message}: {sorted(candidates)}")
        self.candidates = candidates


class MissingRootError(GraphStructureError):
    """The enriched graph carries no ProvenMessage typed node."""


# =============================================================================
# PROJECTION
# =============================================================================


class ProjectionError(ProvenMessageError):
    """A typed view could not be extracted from the message graph."""

    operation = "projection"

    def __init__(self, message: str):
        super().__init__(f"{self.operation}: {message}")


class StatementsProjectionError(ProjectionError):
    operation = "statements"


class MeasurementsProjectionError(ProjectionError):
    operation = "measurements"


class QueryProjectionError(ProjectionError):
    operation = "query"


class UnfilteredQueryError(QueryProjectionError):
    def __init__(self, filter_node: str | None = None):
        detail = "Unfiltered time-series queries are not supported"
        if filter_node:
            detail += f" (query filter: {filter_node})"
        super().__init__(detail)


class FragmentDescriptorError(ProvenMessageError):
    """A metric datatype fragment could not be decoded."""


# =============================================================================
# BUILD
# =============================================================================


class MessageBuildError(ProvenMessageError):
    """Building a message failed at one of the pipeline stages."""

    def __init__(self, stage: str, cause: Exception):
        super().__init__(f"Failed to build message at stage '{stage}': {cause}")
        self.stage = stage
        self.cause = cause


# =============================================================================
# WIRE
# =============================================================================


class WireError(ProvenMessageError, ValueError):
    """A record envelope cannot be encoded or decoded."""
