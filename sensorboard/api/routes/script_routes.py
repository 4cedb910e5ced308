#!/usr/bin/env python3
"""
Script Routes - Script List, Create/Update and Delete
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from ...core.audit import audit_logger
from ...dashboard.controller import DashboardController
from ..dependencies import AuthDependencies, is_htmx, redirect
from ..schemas import ScriptForm

logger = logging.getLogger("sensorboard.server")

SCRIPTS_PATH = "/scripts"


def create_script_routes(
    auth_deps: AuthDependencies,
    controller: DashboardController,
    templates: Jinja2Templates
) -> APIRouter:
    """Create script management routes."""
    router = APIRouter(dependencies=[Depends(auth_deps.require_login)])

    def render_scripts(request: Request, status_code: int = 200, **extra):
        """Exe fragment for htmx, full script page otherwise."""
        if is_htmx(request):
            context = {"scripts": controller.scripts.list_scripts(), **extra}
            return templates.TemplateResponse(request, "components/scripts.html", context,
                                              status_code=status_code)
        context = controller.get_script_view_data()
        context.update(user=auth_deps.current_user(request), **extra)
        return templates.TemplateResponse(request, "scripts.html", context, status_code=status_code)

    @router.get(SCRIPTS_PATH, response_class=HTMLResponse, name="scripts")
    def list_scripts(request: Request):
        """Script list (with the newest log lines on the full page)."""
        return render_scripts(request)

    @router.post(SCRIPTS_PATH, response_class=HTMLResponse)
    def save_script(request: Request, name: str = Form(""), script: str = Form("")):
        """Create a script or replace the content of an existing one."""
        try:
            form = ScriptForm(name=name, script=script)
        except ValidationError as e:
            fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
            logger.info(f"script form rejected, missing: {fields}")
            return render_scripts(request, status_code=422, form_errors=fields,
                                  form_values={"name": name, "script": script})

        controller.save_script(form.name, form.script)
        audit_logger.script_change(action="upsert", name=form.name,
                                   details={"length": len(form.script)}, request=request)
        if is_htmx(request):
            return render_scripts(request)
        return redirect(request, SCRIPTS_PATH)

    @router.post(f"{SCRIPTS_PATH}/delete", response_class=HTMLResponse)
    def delete_script(request: Request, name: Optional[str] = Form(None)):
        """Delete a script by name; unknown names are ignored."""
        controller.delete_script(name)
        if name:
            audit_logger.script_change(action="delete", name=name, details={}, request=request)
        if is_htmx(request):
            return render_scripts(request)
        return redirect(request, SCRIPTS_PATH)

    return router
