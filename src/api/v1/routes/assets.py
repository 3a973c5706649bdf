"""Asset moderation callback routes."""

from fastapi import Depends, Request

from api.dependencies.auth import verify_audit_token
from api.v1.dependencies import get_attachment_service
from api.v1.routing import Route, build_router
from api.v1.schemas.asset import AttachmentResponse, AuditResultRequest
from core.rate_limit import limiter
from domain.services.attachment_service import AttachmentService


@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def apply_audit_result(
    request: Request,
    token: str,
    body: AuditResultRequest,
    _: None = Depends(verify_audit_token),
    service: AttachmentService = Depends(get_attachment_service),
) -> AttachmentResponse:
    """Apply a moderation verdict to an attachment, disabling it if required."""
    attachment = await service.apply_audit_result(token, body.disable, body.result)
    return AttachmentResponse.model_validate(attachment)


routes = [
    Route(
        ("POST",),
        "/audit/{token}/result",
        apply_audit_result,
        response_model=AttachmentResponse,
        summary="Apply moderation result",
        responses={
            401: {"description": "Missing or wrong X-Audit-Token"},
            404: {"description": "Attachment not found"},
        },
    ),
]

router = build_router(routes, prefix="/asset", tags=["assets"])
