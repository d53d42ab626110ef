"""
Message Builder - Turns one JSON message into a ProvenMessage.

Orchestrates the build stages, strictly in order:
context prepending → graph parsing → normalization → rules → projection.

The first failing stage aborts the build with a MessageBuildError naming
the stage and chaining the original cause.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from proven_message.exceptions import MessageBuildError
from proven_message.message.models import ProvenMessage
from proven_message.message.projector import MessageProjector
from proven_message.model.bundle import MessageModel
from proven_message.triples.graph import TripleGraph
from proven_message.triples.normalizer import GraphNormalizer, NormalizedGraph
from proven_message.triples.rules import NoRules, RulesApplicator
from proven_message.triples.vocabulary import MessageContent

logger = logging.getLogger(__name__)

STAGES = ("context", "parse", "normalize", "rules", "project")


# =============================================================================
# BUILD TRACE
# =============================================================================


@dataclass
class BuildTrace:
    """Intermediate results of one build, kept for inspection and debugging."""

    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    json_ld: str | None = None
    parsed: TripleGraph | None = None
    normalized: NormalizedGraph | None = None
    enriched: TripleGraph | None = None
    failed_stage: str | None = None

    def finalize(self) -> None:
        self.completed_at = datetime.now()

    @property
    def duration_seconds(self) -> float:
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration_seconds": round(self.duration_seconds, 4),
            "parsed_triples": len(self.parsed) if self.parsed is not None else None,
            "normalized_triples": (
                len(self.normalized.graph) if self.normalized is not None else None
            ),
            "materialized_nodes": (
                len(self.normalized.materialized) if self.normalized is not None else None
            ),
            "enriched_triples": len(self.enriched) if self.enriched is not None else None,
            "failed_stage": self.failed_stage,
        }


# =============================================================================
# MESSAGE BUILDER
# =============================================================================


class MessageBuilder:
    """
    Builds ProvenMessages against one loaded message model.

    The model is shared read-only; every build works on its own graphs, so a
    single builder can serve concurrent builds.

    Usage:
        model = load_message_model()
        builder = MessageBuilder(model)
        message = builder.build('{"@type": "pm:Measurement", ...}')
    """

    def __init__(
        self,
        model: MessageModel,
        rules: RulesApplicator | NoRules | None = None,
        normalizer: GraphNormalizer | None = None,
        default_domain: str = "proven",
        default_source: str | None = None,
        rules_enabled: bool = True,
        iterate_rules: bool = False,
    ):
        """
        Initialize the builder.

        Args:
            model: Loaded message model bundle
            rules: Rules stage (defaults to the model's SHACL rules)
            normalizer: Normalization stage (defaults to UUID-based IRIs)
            default_domain: Domain for messages built without one
            default_source: Source for messages built without one
            rules_enabled: Apply the model's SHACL rules
            iterate_rules: Re-run rules until no new triples are inferred
        """
        self.model = model
        if rules is None:
            rules = RulesApplicator(model.shapes, iterate_rules) if rules_enabled else NoRules()
        self.rules = rules
        self.normalizer = normalizer or GraphNormalizer()
        self.default_domain = default_domain
        self.default_source = default_source

    def build(
        self,
        message: str,
        *,
        name: str | None = None,
        domain: str | None = None,
        source: str | None = None,
        is_transient: bool = False,
        is_static: bool = False,
        keywords: Iterable[str] = (),
        message_id: uuid.UUID | None = None,
        trace: BuildTrace | None = None,
    ) -> ProvenMessage:
        """
        Build a message from its JSON text.

        Args:
            message: JSON (or JSON-LD) message text
            name: Message name (defaults to ProvenMessage_<id>)
            domain: Message domain (defaults to the builder's default)
            source: Message source
            is_transient: Message should not be persisted
            is_static: Message describes static data
            keywords: Message keywords, order preserved
            message_id: Message id (a random UUID when omitted)
            trace: Optional BuildTrace receiving intermediate graphs

        Returns:
            Immutable ProvenMessage

        Raises:
            MessageBuildError: the first failing stage, with the cause chained
        """
        trace = trace if trace is not None else BuildTrace()
        message_id = message_id or uuid.uuid4()
        logger.info("Building message %s", message_id)

        stage = STAGES[0]
        try:
            trace.json_ld = self.model.prepend_context(message)

            stage = "parse"
            trace.parsed = TripleGraph.from_jsonld(trace.json_ld)

            stage = "normalize"
            trace.normalized = self.normalizer.normalize(trace.parsed)

            stage = "rules"
            trace.enriched = self.rules.apply(trace.normalized.graph).finalize()

            stage = "project"
            content = trace.normalized.content
            projector = MessageProjector(trace.enriched)
            statements = projector.statements()
            measurements = projector.measurements() if content is MessageContent.EXPLICIT else None
            query = projector.query() if content is MessageContent.QUERY else None

            result = ProvenMessage(
                id=message_id,
                raw_text=message,
                content=content,
                name=name or f"ProvenMessage_{message_id}",
                domain=domain or self.default_domain,
                is_transient=is_transient,
                is_static=is_static,
                source=source or self.default_source,
                keywords=tuple(keywords),
                statements=tuple(statements),
                measurements=tuple(measurements) if measurements is not None else None,
                query=query,
            )
        except Exception as e:
            trace.failed_stage = stage
            trace.finalize()
            logger.debug("Build of message %s failed at stage %s", message_id, stage)
            raise MessageBuildError(stage, e) from e

        trace.finalize()
        logger.info(
            "Built %s message %s: %d statements in %.3fs",
            content.value,
            message_id,
            len(result.statements),
            trace.duration_seconds,
        )
        return result


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def build_message(message: str, model: MessageModel, **options) -> ProvenMessage:
    """Quick function to build one message with default stages."""
    return MessageBuilder(model).build(message, **options)
