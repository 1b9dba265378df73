from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from conf import settings
from controllers.coach import get_session
from services.coach_session import CoachSession
from services.presentation import build_page_view

router = APIRouter(tags=["Pages"])

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(request: Request, session: CoachSession = Depends(get_session)):
    """
    Render the page for the current session state.
    """
    return templates.TemplateResponse(
        request,
        "index.html",
        {"view": build_page_view(session), "project_name": settings.PROJECT_NAME},
    )
