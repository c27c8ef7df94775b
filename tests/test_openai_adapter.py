import json

import httpx
import pytest
from fakes import BrokenStream, collect, run
from openai.types.chat import ChatCompletionChunk

from thaina_juridico.domain.entities import ChatMessage, Role
from thaina_juridico.domain.exceptions import UpstreamError, UpstreamRateLimitError
from thaina_juridico.infrastructure.openai_adapter import (
    OpenAICompatibleAdapter,
    decode_chunk,
    decode_stream_line,
    encode_messages,
)

_MESSAGES = [
    ChatMessage(role=Role.USER, content="Quais os prazos do CDC?"),
    ChatMessage(role=Role.ASSISTANT, content="Depende."),
    ChatMessage(role=Role.USER, content="Para vício aparente."),
]


def _chunk(content=None, role=None):
    delta = {}
    if role is not None:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    return {
        "id": "gen-1",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": "openai/gpt-oss-120b:free",
        "choices": [{"index": 0, "delta": delta, "finish_reason": None}],
    }


def _sse_body(*chunks):
    parts = [": OPENROUTER PROCESSING\n\n"]
    parts.extend(f"data: {json.dumps(c)}\n\n" for c in chunks)
    parts.append("data: [DONE]\n\n")
    return "".join(parts).encode()


def _adapter(handler, **kwargs):
    return OpenAICompatibleAdapter(
        name="openrouter",
        api_key="sk-test",
        model="openai/gpt-oss-120b:free",
        base_url="https://openrouter.test/api/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


def test_encode_messages_puts_system_prompt_first():
    encoded = encode_messages("REGRAS", _MESSAGES)
    assert encoded[0] == {"role": "system", "content": "REGRAS"}
    assert [m["role"] for m in encoded] == ["system", "user", "assistant", "user"]
    assert sum(1 for m in encoded if m["role"] == "system") == 1


def test_decode_chunk_drops_empty_and_role_only_deltas():
    assert decode_chunk(ChatCompletionChunk.model_validate(_chunk(role="assistant"))) == []
    assert decode_chunk(ChatCompletionChunk.model_validate(_chunk(content=""))) == []
    [delta] = decode_chunk(ChatCompletionChunk.model_validate(_chunk(content="Art. 26")))
    assert delta.delta_content == "Art. 26"


def test_stream_relays_deltas_in_order():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["headers"] = request.headers
        captured["body"] = json.loads(request.content)
        body = _sse_body(
            _chunk(role="assistant", content=""),
            _chunk(content="O prazo "),
            _chunk(content="é de 30 dias"),
            _chunk(content=" (art. 26)."),
        )
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=body)

    adapter = _adapter(
        handler,
        extra_headers={"X-Title": "Thaina Juridico"},
        extra_body={"reasoning": {"enabled": True}},
    )

    async def scenario():
        return await collect(await adapter.open_stream("REGRAS", _MESSAGES))

    assert run(scenario()) == ["O prazo ", "é de 30 dias", " (art. 26)."]
    assert captured["url"] == "https://openrouter.test/api/v1/chat/completions"
    assert captured["headers"]["authorization"] == "Bearer sk-test"
    assert captured["headers"]["x-title"] == "Thaina Juridico"
    assert captured["body"]["stream"] is True
    assert captured["body"]["reasoning"] == {"enabled": True}
    assert captured["body"]["messages"][0] == {"role": "system", "content": "REGRAS"}


@pytest.mark.parametrize(
    "line",
    [
        "",
        ": OPENROUTER PROCESSING",
        "data: [DONE]",
        "data: {not json",
        'data: {"error": {"message": "overloaded"}}',
        f"data: {json.dumps(_chunk(role='assistant'))}",
    ],
)
def test_decode_stream_line_drops_control_and_malformed_frames(line):
    assert decode_stream_line(line) == []


def test_decode_stream_line_extracts_delta():
    [delta] = decode_stream_line(f"data:{json.dumps(_chunk(content='Súmula 297'))}")
    assert delta.delta_content == "Súmula 297"


def test_malformed_line_is_dropped_and_stream_continues():
    def handler(request: httpx.Request) -> httpx.Response:
        body = (
            f"data: {json.dumps(_chunk(content='um '))}\n\n"
            "data: {not json\n\n"
            f"data: {json.dumps(_chunk(content='dois'))}\n\n"
            "data: [DONE]\n\n"
        )
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=body.encode())

    async def scenario():
        return await collect(await _adapter(handler).open_stream("REGRAS", _MESSAGES))

    assert run(scenario()) == ["um ", "dois"]


def test_mid_stream_failure_ends_stream_and_closes_response():
    body = BrokenStream(
        [
            f"data: {json.dumps(_chunk(content='Primeiro'))}\n\n".encode(),
            f"data: {json.dumps(_chunk(content=' segundo'))}\n\n".encode(),
        ]
    )

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"content-type": "text/event-stream"}, stream=body)

    async def scenario():
        return await collect(await _adapter(handler).open_stream("REGRAS", _MESSAGES))

    assert run(scenario()) == ["Primeiro", " segundo"]
    assert body.closed


def test_rate_limit_is_reported_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(429, json={"error": {"message": "Rate limit exceeded"}})

    with pytest.raises(UpstreamRateLimitError):
        run(_adapter(handler).open_stream("REGRAS", _MESSAGES))
    assert len(calls) == 1


def test_server_error_is_generic_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "boom"}})

    with pytest.raises(UpstreamError) as excinfo:
        run(_adapter(handler).complete("REGRAS", _MESSAGES))
    assert not isinstance(excinfo.value, UpstreamRateLimitError)
    assert "500" in str(excinfo.value)


def test_network_failure_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamError):
        run(_adapter(handler).open_stream("REGRAS", _MESSAGES))


def test_complete_returns_message_content():
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content).get("stream") is not True
        return httpx.Response(
            200,
            json={
                "id": "gen-2",
                "object": "chat.completion",
                "created": 1700000000,
                "model": "gpt-4o-mini",
                "choices": [
                    {
                        "index": 0,
                        "finish_reason": "stop",
                        "message": {"role": "assistant", "content": "Resposta completa."},
                    }
                ],
            },
        )

    assert run(_adapter(handler).complete("REGRAS", _MESSAGES)) == "Resposta completa."
