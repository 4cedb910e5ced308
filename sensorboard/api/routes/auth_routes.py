#!/usr/bin/env python3
"""
Authentication Routes - Sign In and Sign Out
"""

import logging
from fastapi import APIRouter, Form, Request
from fastapi.templating import Jinja2Templates

from ..dependencies import AuthDependencies, SIGN_IN_PATH, redirect

logger = logging.getLogger("sensorboard.server")

SIGN_IN_ERROR = "Invalid username or password."


def create_auth_routes(auth_deps: AuthDependencies, templates: Jinja2Templates) -> APIRouter:
    """Create sign-in/sign-out routes."""
    router = APIRouter()

    @router.get(SIGN_IN_PATH, name="sign_in")
    def sign_in_form(request: Request):
        """Sign-in page; already signed-in users go straight to the dashboard."""
        if auth_deps.is_logged_in(request):
            return redirect(request, "/")
        return templates.TemplateResponse(request, "sign_in.html", {
            "page_title": "Sign in",
            "errors": [],
            "username": "",
        })

    @router.post(SIGN_IN_PATH)
    def sign_in(request: Request, username: str = Form(""), password: str = Form("")):
        """Check credentials; failures are reported on the form, never with the derived hash."""
        errors = []
        if not username.strip():
            errors.append("Username")
        if not password:
            errors.append("Password")
        if errors:
            return templates.TemplateResponse(request, "sign_in.html", {
                "page_title": "Sign in",
                "errors": ["This field is required."],
                "missing": errors,
                "username": username,
            }, status_code=422)

        if auth_deps.sign_in(request, username.strip(), password):
            return redirect(request, "/")

        return templates.TemplateResponse(request, "sign_in.html", {
            "page_title": "Sign in",
            "errors": [SIGN_IN_ERROR],
            "username": username,
        })

    @router.get("/sign/out", name="sign_out")
    def sign_out(request: Request):
        auth_deps.sign_out(request)
        return redirect(request, SIGN_IN_PATH)

    return router
