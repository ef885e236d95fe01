"""
Sign-in routes.

``/auth/callback`` receives ``code`` (and optionally ``next``) from the
sign-in step, exchanges the code for a session cookie and redirects to
``next``.  Any failure redirects to ``/auth/error`` with a message.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import RedirectResponse

from ..auth import AuthExchangeError, User
from .schemas import LoginInput

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

LOGIN_PATH = "/auth/login"
NO_CODE_MESSAGE = "No authorization code received"


def _session_token(request: Request) -> Optional[str]:
    return request.cookies.get(request.app.state.settings.session_cookie)


def _safe_next(next_path: Optional[str]) -> str:
    # Only same-site paths; "//host" would be read as another origin.
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return "/"
    return next_path


def _error_redirect(message: str) -> RedirectResponse:
    return RedirectResponse(f"/auth/error?message={quote(message)}", status_code=303)


async def current_user(request: Request) -> User:
    """Dependency: the signed-in user, or 401 pointing at the login route."""
    user = await request.app.state.gateway.get_current_user(_session_token(request))
    if user is None:
        raise HTTPException(status_code=401, detail={"message": "Not signed in", "redirect": LOGIN_PATH})
    return user


@router.post("/login")
async def login(body: LoginInput, request: Request) -> dict:
    """Start a sign-in and return where the client should go to finish it."""
    try:
        code = await request.app.state.gateway.issue_code(body.email)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"redirect": f"/auth/callback?code={quote(code)}&next={quote(_safe_next(body.next))}"}


@router.get("/callback")
async def callback(request: Request, code: Optional[str] = None, next: Optional[str] = None):
    if not code:
        logger.info("No code parameter found in sign-in callback")
        return _error_redirect(NO_CODE_MESSAGE)
    try:
        token = await request.app.state.gateway.exchange_code_for_session(code)
    except AuthExchangeError as e:
        logger.error("Sign-in exchange failed: %s", e)
        return _error_redirect(str(e))
    target = _safe_next(next)
    response = RedirectResponse(target, status_code=303)
    response.set_cookie(request.app.state.settings.session_cookie, token, httponly=True, samesite="lax")
    logger.info("Sign-in succeeded, redirecting to %s", target)
    return response


@router.get("/error")
def error(message: str = "") -> dict:
    return {
        "title": "Error de Autenticación",
        "message": message or "Hubo un problema al iniciar sesión. Por favor, inténtalo de nuevo.",
        "retry": LOGIN_PATH,
    }


@router.post("/logout")
async def logout(request: Request, response: Response) -> dict:
    """End the session and drop the user's in-memory state after saving it."""
    gateway = request.app.state.gateway
    token = _session_token(request)
    user = await gateway.get_current_user(token)
    await gateway.sign_out(token)
    if user is not None:
        async with request.app.state.controllers_lock:
            controller = request.app.state.controllers.pop(user.id, None)
        if controller is not None:
            await controller.close()
    response.delete_cookie(request.app.state.settings.session_cookie)
    return {"redirect": LOGIN_PATH}


@router.get("/me")
async def me(user: User = Depends(current_user)) -> dict:
    return {"id": user.id, "email": user.email}
