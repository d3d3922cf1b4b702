import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_bigmodel_client
from app.models.probe import ProbeError, ProbeFailure, ProbeRequest, ProbeResponse
from app.services.bigmodel_client import BigModelClient, UpstreamStatusError

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ProbeError(error=message).model_dump()
    )


@router.post(
    "/test",
    response_model=ProbeResponse,
    responses={400: {"model": ProbeError}, 500: {"model": ProbeError}},
)
@router.post("/test-connection", include_in_schema=False)
async def probe_endpoint(
    request: ProbeRequest,
    client: BigModelClient = Depends(get_bigmodel_client),
):
    if not request.api_key:
        return _error("API key required", 400)

    try:
        content = await client.probe(api_key=request.api_key, model=request.model_name)
    except UpstreamStatusError as e:
        failure = ProbeFailure.from_status(e.status_code)
        logger.warning(
            "Connectivity probe failed with HTTP %s (%s): %s",
            e.status_code,
            failure.value,
            e.body[:500],
        )
        return _error(failure.value, 400)
    except Exception:
        logger.exception("Connectivity probe failed")
        return _error("network error", 500)

    logger.info("Connectivity probe succeeded for model %s", request.model_name)
    return ProbeResponse(response=content)
