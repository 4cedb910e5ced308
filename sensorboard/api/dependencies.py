#!/usr/bin/env python3
"""
sensorboard API Dependencies - Session Authentication
"""

import logging
from typing import Optional

from fastapi import Request
from fastapi.responses import RedirectResponse, Response

from ..auth import AuthService
from ..core.audit import audit_logger

logger = logging.getLogger("sensorboard.server")

SESSION_USER_KEY = "user"
SIGN_IN_PATH = "/sign/in"


class LoginRequired(Exception):
    """Raised by protected views when the session is not logged in."""


def is_htmx(request: Request) -> bool:
    """Partial (AJAX) request issued by htmx."""
    return request.headers.get("hx-request", "").lower() == "true"


def redirect(request: Request, url: str) -> Response:
    """See-other redirect; htmx requests get an HX-Redirect header instead."""
    if is_htmx(request):
        return Response(status_code=204, headers={"HX-Redirect": url})
    return RedirectResponse(url=url, status_code=303)


async def login_required_handler(request: Request, exc: LoginRequired) -> Response:
    logger.debug(f"unauthenticated access to {request.url.path}, redirecting to sign-in")
    return redirect(request, SIGN_IN_PATH)


class AuthDependencies:
    """Container for session authentication backed by an AuthService."""

    def __init__(self, auth_service: AuthService):
        self.auth_service = auth_service

    @staticmethod
    def current_user(request: Request) -> Optional[str]:
        return request.session.get(SESSION_USER_KEY)

    def is_logged_in(self, request: Request) -> bool:
        return self.current_user(request) is not None

    def require_login(self, request: Request) -> str:
        """Dependency for protected views; returns the signed-in username."""
        user = self.current_user(request)
        if user is None:
            raise LoginRequired()
        return user

    def sign_in(self, request: Request, username: str, password: str) -> bool:
        """Check credentials and, on success, mark the session as logged in."""
        success = self.auth_service.authenticate(username, password)
        audit_logger.sign_in(success=success, username=username, request=request)
        if success:
            request.session.clear()
            request.session[SESSION_USER_KEY] = username
            logger.info(f"user signed in: {username}")
        else:
            logger.warning(f"sign-in failed for user: {username}")
        return success

    def sign_out(self, request: Request) -> None:
        user = self.current_user(request)
        request.session.clear()
        audit_logger.sign_out(username=user, request=request)
