"""
Music Vote Manager - Page Routes

Serves the browser-facing views with Jinja2 templates: login, dashboard,
the add / edit forms, the ranked music list and the voting page, plus the
form handlers behind them.

Every handler except the login pages sits behind the session gate in
main.py, so by the time a handler runs the request carries a valid session.
Unknown or malformed music ids are not errors: the handlers log them and
send the browser back to the dashboard.
"""

import re
from typing import Optional

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from loguru import logger

from musicvote import store
from musicvote.auth import (
    LoginError,
    authenticate,
    clear_session_cookie,
    get_current_user,
    render_login_page,
    set_session_cookie,
)
from musicvote.config import APP_NAME

router = APIRouter(tags=["Pages"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302)


def _parse_id(raw: str) -> Optional[int]:
    """Turn a path segment into a music id, or None if it is not a plain integer."""
    if not re.fullmatch(r"-?[0-9]+", raw):
        return None
    return int(raw)


def render_page(request: Request, template: str, status_code: int = 200, **context):
    """Render *template* with the fields every page expects."""
    context.setdefault("app_name", APP_NAME)
    context.setdefault("current_user", get_current_user(request))
    return request.app.state.templates.TemplateResponse(
        request, template, context, status_code=status_code
    )


def _missing_fields(title: str, artist: str) -> str:
    """Return an error message if either field is blank, else an empty string."""
    missing = [name for name, value in (("Title", title), ("Artist", artist)) if not value]
    if not missing:
        return ""
    return " and ".join(missing) + (" is required" if len(missing) == 1 else " are required")


# ---------------------------------------------------------------------------
# Login / Logout
# ---------------------------------------------------------------------------
@router.get("/", response_class=HTMLResponse)
@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Show the login form."""
    # If already logged in, go straight to the dashboard
    if get_current_user(request):
        return _redirect("/dashboard")
    return render_login_page()


@router.post("/login")
async def login_post(
    username: str = Form(""),
    password: str = Form(""),
):
    """Handle login form submission."""
    try:
        user = authenticate(username, password)
    except LoginError as e:
        logger.warning("🔒 Failed login attempt for '{}': {}", username, e)
        return render_login_page(error=str(e), prefill_user=username)

    logger.info("🔓 User '{}' logged in", user["username"])
    response = _redirect("/dashboard")
    set_session_cookie(response, user)
    return response


@router.get("/logout")
async def logout(request: Request):
    """Log out and redirect to the login page."""
    user = get_current_user(request)
    if user:
        logger.info("🔒 User '{}' logged out", user)
    response = _redirect("/login")
    clear_session_cookie(response)
    return response


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request):
    """Greeting plus the music collection ranked by votes."""
    return render_page(
        request,
        "dashboard.html",
        page_title="Dashboard",
        username=get_current_user(request),
        music=store.get_music(sort_by_votes=True),
    )


# ---------------------------------------------------------------------------
# Add music
# ---------------------------------------------------------------------------
@router.get("/add-music", response_class=HTMLResponse)
async def add_music_page(request: Request):
    return render_page(request, "add_music.html", page_title="Add Music")


@router.post("/add-music")
async def add_music(
    request: Request,
    title: str = Form(""),
    artist: str = Form(""),
):
    """Create a music item from the add form."""
    title, artist = title.strip(), artist.strip()
    error = _missing_fields(title, artist)
    if error:
        return render_page(
            request,
            "add_music.html",
            status_code=400,
            page_title="Add Music",
            error=error,
            title=title,
            artist=artist,
        )

    store.insert_music(title, artist)
    return _redirect("/dashboard")


# ---------------------------------------------------------------------------
# Voting
# ---------------------------------------------------------------------------
@router.get("/vote", response_class=HTMLResponse)
async def vote_page(request: Request):
    """Voting page listing the collection in insertion order."""
    return render_page(
        request,
        "vote.html",
        page_title="Vote",
        music=store.get_music(),
    )


@router.post("/vote/{music_id}")
async def vote(music_id: str):
    """Add one vote to a music item."""
    parsed = _parse_id(music_id)
    if parsed is not None:
        store.vote_for_music(parsed)
    else:
        logger.warning("⚠️ Vote with malformed id '{}'", music_id)
    return _redirect("/dashboard")


# ---------------------------------------------------------------------------
# Edit music
# ---------------------------------------------------------------------------
@router.get("/edit-music/{music_id}", response_class=HTMLResponse)
async def edit_music_page(request: Request, music_id: str):
    """Show the edit form for one music item."""
    parsed = _parse_id(music_id)
    item = store.get_music_by_id(parsed) if parsed is not None else None
    if item is None:
        logger.warning("⚠️ Edit requested for unknown music id '{}'", music_id)
        return _redirect("/dashboard")

    return render_page(
        request,
        "edit_music.html",
        page_title=f"Edit: {item['title']}",
        music=item,
    )


@router.post("/edit-music/{music_id}")
async def edit_music(
    request: Request,
    music_id: str,
    title: str = Form(""),
    artist: str = Form(""),
):
    """Apply the edit form to a music item."""
    parsed = _parse_id(music_id)
    if parsed is None:
        logger.warning("⚠️ Update with malformed id '{}'", music_id)
        return _redirect("/dashboard")

    title, artist = title.strip(), artist.strip()
    error = _missing_fields(title, artist)
    if error:
        item = store.get_music_by_id(parsed)
        if item is None:
            return _redirect("/dashboard")
        item.update(title=title, artist=artist)
        return render_page(
            request,
            "edit_music.html",
            status_code=400,
            page_title="Edit Music",
            music=item,
            error=error,
        )

    store.update_music(parsed, title, artist)
    return _redirect("/dashboard")


# ---------------------------------------------------------------------------
# Delete music
# ---------------------------------------------------------------------------
@router.post("/delete-music/{music_id}")
async def delete_music(music_id: str):
    parsed = _parse_id(music_id)
    if parsed is not None:
        store.delete_music(parsed)
    else:
        logger.warning("⚠️ Delete with malformed id '{}'", music_id)
    return _redirect("/dashboard")


# ---------------------------------------------------------------------------
# Music list
# ---------------------------------------------------------------------------
@router.get("/music-list", response_class=HTMLResponse)
async def music_list(request: Request):
    """Read-only ranking of the collection."""
    return render_page(
        request,
        "music_list.html",
        page_title="Music List",
        music=store.get_music(sort_by_votes=True),
    )
