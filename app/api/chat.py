import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from app.dependencies import get_bigmodel_client
from app.models.chat import ChatRequest
from app.services.bigmodel_client import (
    BigModelClient,
    UpstreamStatusError,
    UpstreamTransportError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_class=StreamingResponse)
async def chat_endpoint(
    request: ChatRequest,
    client: BigModelClient = Depends(get_bigmodel_client),
) -> StreamingResponse:
    """Relay the conversation upstream and stream the reply back as plain text."""
    if not request.api_key:
        raise HTTPException(status_code=400, detail="API key required")

    try:
        stream = await client.open_chat_stream(
            messages=request.messages,
            api_key=request.api_key,
            model=request.model_name,
        )
    except UpstreamStatusError as e:
        logger.warning("Chat upstream rejected request with HTTP %s", e.status_code)
        raise HTTPException(status_code=e.status_code, detail=f"API Error: {e.status_code}")
    except UpstreamTransportError:
        logger.exception("Chat upstream unreachable")
        raise HTTPException(status_code=500, detail="Server error")
    except Exception:
        logger.exception("Chat endpoint failed")
        raise HTTPException(status_code=500, detail="Server error")

    return StreamingResponse(
        stream.fragments(),
        media_type="text/plain",
        headers={"Cache-Control": "no-cache"},
        background=BackgroundTask(stream.aclose),
    )
