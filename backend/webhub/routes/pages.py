from fastapi import APIRouter, Depends, Query, Request, Response

from ..cloud_services import CLOUD_SERVICES
from ..sessions import SessionState, get_session_state
from ..templating import render_page

router = APIRouter()


@router.get("/")
async def home(
    request: Request,
    error: str = Query(""),
    session_state: SessionState = Depends(get_session_state),
):
    return render_page(request, "home.html", session_state, {"error": error})


@router.head("/")
async def home_head():
    return Response(status_code=200)


@router.get("/about")
async def about(
    request: Request, session_state: SessionState = Depends(get_session_state)
):
    return render_page(request, "about.html", session_state)


@router.get("/cloud")
async def cloud(
    request: Request, session_state: SessionState = Depends(get_session_state)
):
    return render_page(
        request, "cloud.html", session_state, {"services": CLOUD_SERVICES}
    )
