from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..dependencies import get_contact_service
from ..schemas import ActionResult, ContactForm
from ..services.contact import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])


def get_client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return request.client.host if request.client else None


@router.post("", response_model=ActionResult, response_model_exclude_none=True)
async def submit_contact(
    form: ContactForm,
    request: Request,
    service: ContactService = Depends(get_contact_service),
):
    result = await service.submit(
        form,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    if not result.success:
        return JSONResponse(status_code=400, content=result.model_dump(exclude_none=True))
    return result
