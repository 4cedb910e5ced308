#!/usr/bin/env python3
"""
Dashboard Routes - Current Values, Log Browser and Graph
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from ...dashboard.controller import DashboardController
from ..dependencies import AuthDependencies, is_htmx, redirect
from ..schemas import GraphPayload, GraphRequest

logger = logging.getLogger("sensorboard.server")

GRAPH_FIELDS = ("value", "date_from", "date_to")


def _sensor_values(source) -> List[str]:
    # Both repeated `sensors=1&sensors=2` and PHP-style `sensors[]=1` are accepted
    return list(source.getlist("sensors")) + list(source.getlist("sensors[]"))


def merge_graph_inputs(query, form) -> Dict[str, Any]:
    """Graph inputs from query parameters, overridden by form fields that are present."""
    data: Dict[str, Any] = {"sensors": _sensor_values(query)}
    for key in GRAPH_FIELDS:
        data[key] = query.get(key)
    if form is not None:
        form_sensors = _sensor_values(form)
        if form_sensors:
            data["sensors"] = form_sensors
        for key in GRAPH_FIELDS:
            if form.get(key) is not None:
                data[key] = form.get(key)
    return data


def parse_graph_request(data: Dict[str, Any]) -> Optional[GraphRequest]:
    try:
        return GraphRequest(**data)
    except ValidationError as e:
        logger.info(f"rejected graph input: {e.errors()}")
        return None


def create_dashboard_routes(
    auth_deps: AuthDependencies,
    controller: DashboardController,
    templates: Jinja2Templates
) -> APIRouter:
    """Create dashboard and web UI routes."""
    router = APIRouter(dependencies=[Depends(auth_deps.require_login)])

    @router.get("/", response_class=HTMLResponse, name="homepage")
    def dashboard_main(request: Request):
        """Main page - current values, newest logs, scripts and the graph launcher."""
        logger.debug("Rendering main dashboard")
        dashboard_data = controller.get_main_dashboard_data()
        dashboard_data["user"] = auth_deps.current_user(request)
        return templates.TemplateResponse(request, "dashboard.html", dashboard_data)

    @router.get("/values", response_class=HTMLResponse)
    def refresh_current_values(request: Request):
        """Refresh the current values table via htmx."""
        return templates.TemplateResponse(request, "components/current_values.html", {
            "current_values": controller.sensors.current_values(),
        })

    @router.post("/logs", response_class=HTMLResponse)
    def filter_logs(
        request: Request,
        level: Optional[int] = Form(None),
        log_from: Optional[str] = Form(None),
        log_to: Optional[str] = Form(None),
    ):
        """Log browser: entries at or above `level` inside the window, newest first."""
        logs_data = controller.get_logs_data(level, log_from, log_to)
        if is_htmx(request):
            return templates.TemplateResponse(request, "components/log_browser.html", logs_data)

        dashboard_data = controller.get_main_dashboard_data()
        dashboard_data.update(user=auth_deps.current_user(request), log_results=logs_data["logs"],
                              log_filter=logs_data["log_filter"])
        return templates.TemplateResponse(request, "dashboard.html", dashboard_data)

    @router.get("/graph", response_class=HTMLResponse, name="graph")
    def graph_page(request: Request):
        """Full graph page for the sensors, value and period in the query string."""
        graph_request = parse_graph_request(merge_graph_inputs(request.query_params, None)) or GraphRequest()
        page_data = controller.get_graph_page_data(graph_request)
        page_data["user"] = auth_deps.current_user(request)
        return templates.TemplateResponse(request, "graph.html", page_data)

    @router.api_route("/graph/update", methods=["GET", "POST"])
    async def graph_update(request: Request):
        """
        Graph update action.

        Inputs come from the query string or the submitted form (form wins).
        Incomplete input redirects back without computing anything; htmx
        requests get the Graph fragment, everything else the JSON payload.
        """
        form = await request.form() if request.method == "POST" else None
        graph_request = parse_graph_request(merge_graph_inputs(request.query_params, form))
        graph = None
        if graph_request is not None:
            graph = await run_in_threadpool(controller.build_graph, graph_request)
        if graph is None:
            return redirect(request, "/")

        if is_htmx(request):
            return templates.TemplateResponse(request, "components/graph.html", {"graph": graph})
        payload = GraphPayload(**graph.to_payload())
        return JSONResponse(payload.model_dump())

    return router
