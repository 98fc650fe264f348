"""
Music Vote Manager - Session Auth

Users log in against the in-memory user list and receive a signed session
cookie.  The cookie carries the user id and username; nothing is kept
server-side, so logging out simply clears the cookie.

Usage:
    - `auth_middleware` in main.py calls `auth_required` on every request
      and redirects to /login when it returns True.
    - The login handler calls `authenticate` and catches `LoginError`.
    - Call `get_current_user(request)` to retrieve the logged-in username.
"""

import hashlib
import hmac
import html
import json
import time
from typing import Any

from fastapi import Request, Response
from fastapi.responses import HTMLResponse

from musicvote import store
from musicvote.config import (
    APP_NAME,
    SECRET_KEY,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE,
)


class LoginError(Exception):
    """Raised when a username/password pair does not match a known user."""


# ---------------------------------------------------------------------------
# Cookie helpers
# ---------------------------------------------------------------------------


def _sign(payload: str) -> str:
    """Create an HMAC-SHA256 signature for a payload string."""
    return hmac.new(
        SECRET_KEY.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def _create_session_cookie(user_id: int, username: str) -> str:
    """Create a signed session cookie value."""
    data = json.dumps(
        {
            "uid": user_id,
            "user": username,
            "ts": int(time.time()),
        }
    )
    sig = _sign(data)
    return f"{data}|{sig}"


def _parse_session_cookie(cookie_value: str) -> dict[str, Any] | None:
    """Parse and verify a session cookie.  Returns the session dict or None."""
    if not cookie_value or "|" not in cookie_value:
        return None

    data_part, sig_part = cookie_value.rsplit("|", 1)
    expected_sig = _sign(data_part)
    if not hmac.compare_digest(sig_part.encode("utf-8"), expected_sig.encode("utf-8")):
        return None

    try:
        session = json.loads(data_part)
    except json.JSONDecodeError:
        return None

    if not isinstance(session, dict):
        return None

    # Check expiry
    created = session.get("ts", 0)
    if not isinstance(created, (int, float)) or time.time() - created > SESSION_MAX_AGE:
        return None

    return session


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def authenticate(username: str, password: str) -> dict[str, Any]:
    """
    Look up *username* and check *password* against it.

    Returns the matching user dict.  Raises ``LoginError`` with a
    user-facing message when the user is unknown or the password differs.
    """
    user = store.get_user_by_username(username)
    if user is None:
        raise LoginError("User not found")

    if not hmac.compare_digest(password.encode("utf-8"), user["password"].encode("utf-8")):
        raise LoginError("Invalid password")

    return user


def get_session(request: Request) -> dict[str, Any] | None:
    """Return the verified session payload, or None if not logged in."""
    cookie = request.cookies.get(SESSION_COOKIE_NAME, "")
    session = _parse_session_cookie(cookie)
    if session and session.get("uid") is not None:
        return session
    return None


def get_current_user(request: Request) -> str | None:
    """Return the logged-in username, or None if not authenticated."""
    session = get_session(request)
    if session:
        return session.get("user")
    return None


def get_current_user_id(request: Request) -> int | None:
    """Return the logged-in user id, or None if not authenticated."""
    session = get_session(request)
    if session:
        return session.get("uid")
    return None


def is_authenticated(request: Request) -> bool:
    """Check whether the current request has a valid session."""
    return get_session(request) is not None


def set_session_cookie(response: Response, user: dict[str, Any]) -> None:
    """Set the signed session cookie for *user* on a response."""
    value = _create_session_cookie(user["id"], user["username"])
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=value,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    """Remove the session cookie."""
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
    )


# ---------------------------------------------------------------------------
# Auth check — returns True if request should be redirected to /login
# ---------------------------------------------------------------------------

# Paths that don't require authentication
PUBLIC_PATHS = {
    "/login",
    "/logout",
    "/health",
    "/check-data",
    "/reset-demo",
    "/static",
}


def _is_public(path: str) -> bool:
    """Return True if the path does not require authentication."""
    if path == "/":
        return True
    for pub in PUBLIC_PATHS:
        if path == pub or path.startswith(pub + "/"):
            return True
    if path in ("/favicon.ico", "/robots.txt"):
        return True
    return False


def auth_required(request: Request) -> bool:
    """
    Return True if this request requires auth and the user is NOT logged in.
    (i.e. the request should be redirected to /login.)
    """
    if _is_public(request.url.path):
        return False

    return not is_authenticated(request)


# ---------------------------------------------------------------------------
# Login page HTML
# ---------------------------------------------------------------------------

LOGIN_PAGE_HTML = """\
<!doctype html>
<html lang="en">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Login — %(app_name)s</title>
    <link rel="stylesheet" href="/static/css/style.css" />
</head>
<body class="login-body">
    <div class="login-card">
        <div class="login-header">
            <span class="icon">🎵</span>
            <h1>%(app_name)s</h1>
            <p>Sign in to add, edit and vote for music</p>
        </div>

        %(error_html)s

        <form method="POST" action="/login">
            <div class="form-group">
                <label for="username">Username</label>
                <input
                    type="text"
                    id="username"
                    name="username"
                    placeholder="Enter your username"
                    autocomplete="username"
                    value="%(prefill_user)s"
                    required
                    autofocus
                />
            </div>

            <div class="form-group">
                <label for="password">Password</label>
                <input
                    type="password"
                    id="password"
                    name="password"
                    placeholder="Enter your password"
                    autocomplete="current-password"
                    required
                />
            </div>

            <button type="submit" class="btn btn-primary btn-block">Sign In</button>
        </form>

        <p class="footer-note">Demo accounts: user1 / user2 &bull; password123</p>
    </div>
</body>
</html>
"""


def render_login_page(error: str = "", prefill_user: str = "") -> HTMLResponse:
    """Render the login page with an optional error message."""
    error_html = ""
    if error:
        error_html = f'<div class="error-msg">{html.escape(error)}</div>'

    content = LOGIN_PAGE_HTML % {
        "app_name": APP_NAME,
        "error_html": error_html,
        "prefill_user": html.escape(prefill_user, quote=True),
    }
    return HTMLResponse(content=content)
