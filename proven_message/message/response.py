"""
Message responses returned to producers after a build attempt.
"""

from uuid import UUID

from proven_message.message.models import ProvenMessage, Record

CREATED = ("CREATED", 201)
BAD_REQUEST = ("BAD_REQUEST", 400)


class MessageResponse(Record):
    """Outcome of one message request."""

    request_id: str
    status: str
    code: int
    reason: str | None = None
    response: str | None = None


def error_chain(exc: BaseException) -> str:
    """Join an exception's message with the messages of its causes."""
    messages = []
    seen = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = str(current) or type(current).__name__
        if text not in messages:
            messages.append(text)
        current = current.__cause__
    return " <- ".join(messages)


def response_for(message: ProvenMessage) -> MessageResponse:
    status, code = CREATED
    return MessageResponse(
        request_id=str(message.id),
        status=status,
        code=code,
        response=message.message_key,
    )


def response_for_error(request_id: UUID | str, exc: BaseException) -> MessageResponse:
    """
    Build a Bad Request response for a failed build.

    Args:
        request_id: Id of the rejected request
        exc: The error raised by the build

    Returns:
        MessageResponse whose reason is the full error chain
    """
    status, code = BAD_REQUEST
    return MessageResponse(
        request_id=str(request_id),
        status=status,
        code=code,
        reason=error_chain(exc),
    )
