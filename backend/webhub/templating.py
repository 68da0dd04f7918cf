from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates

from .sessions import SessionState, SessionStatus, clear_session

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


def render_page(
    request: Request,
    name: str,
    session_state: SessionState,
    context: dict[str, Any] | None = None,
    *,
    status_code: int = 200,
):
    """Render ``name`` with the login flag every page's navigation needs."""

    page_context = {
        "is_logged_in": session_state.is_logged_in,
        "profile": session_state.profile,
    }
    page_context.update(context or {})
    response = templates.TemplateResponse(
        request, name, page_context, status_code=status_code
    )
    if session_state.status is SessionStatus.CORRUPT:
        clear_session(response)
    return response
