"""Chat API endpoint implementation."""

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from bridgeme.infra.history import record_to_message
from bridgeme.infra.logging import bind_conversation_id

from .deps import ChatServiceDep
from .exceptions import EmptyMessageError
from .models import ChatRequest
from .streaming import sse_stream

STREAMING_RESPONSE_MEDIA_TYPE = "text/event-stream"
STREAMING_RESPONSE_HEADERS = {
    "Cache-Control": "no-cache, no-transform",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat")
async def chat(
    chat_request: ChatRequest,
    chat_service: ChatServiceDep,
) -> StreamingResponse:
    """
    Classify the message's mood and stream a reply in the matching mode.

    The response is a stream of Server-Sent Events, each a JSON object:
    - meta: mood, mode, confidence and rationale (always first)
    - token: one generated text fragment
    - done: generation finished
    - error: generation failed mid-stream

    Failures before streaming starts are plain JSON errors instead:
    400 for an empty message, 500 for a missing credential or a reply
    stream that could not be opened.
    """
    bind_conversation_id(chat_request.conversation_id)
    if not chat_request.message:
        raise EmptyMessageError()

    ctx = await chat_service.build_context(
        chat_request.message,
        chat_request.conversation_id,
        [record_to_message(m) for m in chat_request.history],
    )
    turn = await chat_service.prepare(ctx)
    return StreamingResponse(
        sse_stream(chat_service.stream_response(turn)),
        media_type=STREAMING_RESPONSE_MEDIA_TYPE,
        headers=STREAMING_RESPONSE_HEADERS,
    )
