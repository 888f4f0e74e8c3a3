"""Landing page."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ..dependencies import SettingsDep
from ..templating import templates

router = APIRouter()


@router.get("/", response_class=HTMLResponse, summary="Landing page")
async def home(request: Request, settings: SettingsDep) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": settings.app_title,
            "upload_field": settings.upload_field_name,
            "max_upload_size_mb": settings.max_upload_size_mb,
        },
    )
