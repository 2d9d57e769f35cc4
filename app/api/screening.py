from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from app.api.dependencies import get_gateway
from app.lib.logger import configure_logger
from app.services.screening import GatewayRequest, ScreeningGateway
from app.services.screening.criteria import get_criteria_catalogue
from app.services.screening.identity import derive_client_identity, merge_headers

# Configure logger
logger = configure_logger(__name__)

# Create the router
router = APIRouter(prefix="/screening", tags=["screening"])


@router.post("/evaluate_draft")
async def evaluate_draft(
    request: Request,
    gateway: ScreeningGateway = Depends(get_gateway),
) -> JSONResponse:
    """Screen a draft proposal without saving it.

    Accepts ``{"title": str, "content": str}``. Callers with a valid bearer
    credential are unlimited; anonymous callers share a small per-origin
    quota reported through the ``X-RateLimit-*`` headers.

    Args:
        request: The FastAPI request object.
        gateway: The screening gateway.

    Returns:
        JSONResponse: ``{"evaluation": ..., "authenticatedAs"?: ...}`` or an error body.
    """
    result = await gateway.handle(
        GatewayRequest(
            method=request.method,
            headers=request.headers,
            client_host=request.client.host if request.client else None,
            body=await request.body(),
        )
    )
    return JSONResponse(
        status_code=result.status_code, content=result.body, headers=result.headers
    )


@router.api_route(
    "/evaluate_draft",
    methods=["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def evaluate_draft_wrong_method(
    request: Request,
    gateway: ScreeningGateway = Depends(get_gateway),
) -> JSONResponse:
    """Answer non-POST methods with the gateway's JSON 405."""
    return await evaluate_draft(request, gateway)


@router.get("/criteria")
async def get_criteria() -> JSONResponse:
    """Get the screening rubric: every criterion's key, label and description."""
    return JSONResponse(content=get_criteria_catalogue())


@router.get("/quota")
async def get_quota(
    request: Request,
    gateway: ScreeningGateway = Depends(get_gateway),
) -> JSONResponse:
    """Report the caller's remaining free screenings without using one."""
    identity = await gateway.identity_resolver.resolve(
        request.headers.get("authorization")
    )
    if identity.authenticated:
        return JSONResponse(
            content={"unlimited": True, "authenticatedAs": identity.account_id}
        )

    client_id = derive_client_identity(
        merge_headers(request.headers.items()),
        request.client.host if request.client else None,
    )
    limiter = gateway.rate_limiter
    quota = limiter.peek(client_id)

    content = {
        "unlimited": False,
        "limit": limiter.max_requests,
        "remaining": quota.remaining,
    }
    if quota.reset_time is not None:
        content["resetsIn"] = limiter.retry_after(quota.reset_time)
    return JSONResponse(content=content)
