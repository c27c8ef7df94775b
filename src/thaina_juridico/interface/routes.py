"""API routes — thin controllers that delegate to the use cases."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from thaina_juridico.domain.entities import Mode
from thaina_juridico.interface.dependencies import (
    get_chat_use_case,
    get_extract_use_case,
    get_import_use_case,
)
from thaina_juridico.interface.schemas import (
    ChatRequest,
    ErrorResponse,
    ExtractRequest,
    ExtractResponse,
    ImportRequest,
    ImportResponse,
    ImportResultItem,
)
from thaina_juridico.services.chat_gateway import ChatGatewayUseCase
from thaina_juridico.services.event_stream import completion_body, encode_events
from thaina_juridico.services.extract_document import ExtractDocumentUseCase
from thaina_juridico.services.import_legislation import ImportLegislationUseCase

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse, "description": "Malformed request"},
    500: {"model": ErrorResponse, "description": "Configuration or upstream error"},
}


@router.post(
    "/chat",
    response_model=None,
    responses={
        200: {"description": "text/event-stream of deltas, or a JSON completion"},
        429: {"model": ErrorResponse, "description": "All LLM backends rate limited"},
        **_ERRORS,
    },
)
async def chat(
    body: ChatRequest,
    use_case: ChatGatewayUseCase = Depends(get_chat_use_case),
) -> StreamingResponse | JSONResponse:
    """Answer a legal question as the Thainá assistant."""
    messages = [m.to_entity() for m in body.messages]
    mode = Mode.parse(body.mode)

    if body.stream:
        result = await use_case.stream(messages, mode, body.user_id)
        return StreamingResponse(
            encode_events(result.chunks),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-LLM-Backend": result.backend},
        )

    completion = await use_case.complete(messages, mode, body.user_id)
    return JSONResponse(
        completion_body(completion.content),
        headers={"X-LLM-Backend": completion.backend},
    )


@router.post(
    "/extract-pdf",
    response_model=ExtractResponse,
    responses=_ERRORS,
)
async def extract_pdf(
    body: ExtractRequest,
    use_case: ExtractDocumentUseCase = Depends(get_extract_use_case),
) -> ExtractResponse:
    """Extract an uploaded document's text into the knowledge base."""
    result = await use_case.execute(body.document_id, body.file_path)
    return ExtractResponse(text_length=result.text_length, preview=result.preview)


@router.post(
    "/import-vademecum",
    response_model=ImportResponse,
    response_model_exclude_none=True,
    responses=_ERRORS,
)
async def import_vademecum(
    body: ImportRequest,
    use_case: ImportLegislationUseCase = Depends(get_import_use_case),
) -> ImportResponse:
    """Import the federal legislation catalog into the user's knowledge base."""
    outcomes = await use_case.execute(body.user_id)
    return ImportResponse(results=[ImportResultItem.from_outcome(o) for o in outcomes])
