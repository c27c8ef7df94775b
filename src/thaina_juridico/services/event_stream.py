"""Server-sent-event encoding of normalized chat output.

Whatever backend produced the text, the caller always receives
chat-completions shaped records.
"""

from __future__ import annotations

import json
from typing import AsyncIterator

from thaina_juridico.domain.entities import StreamChunk


def encode_event(chunk: StreamChunk) -> str:
    """One ``data: <json>`` record for a single delta."""
    payload = {"choices": [{"delta": {"content": chunk.delta_content}}]}
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


def completion_body(content: str) -> dict[str, object]:
    """Non-streamed response body."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


async def encode_events(chunks: AsyncIterator[StreamChunk]) -> AsyncIterator[str]:
    """Re-frame a delta stream as SSE records, one per non-empty delta.

    Closing this generator (client disconnect) closes *chunks* too, which
    releases the upstream response.
    """
    try:
        async for chunk in chunks:
            if chunk.delta_content:
                yield encode_event(chunk)
    finally:
        aclose = getattr(chunks, "aclose", None)
        if aclose is not None:
            await aclose()
