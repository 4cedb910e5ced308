#!/usr/bin/env python3
"""
sensorboard FastAPI application factory

Wires configuration, the three stores, the dashboard controller, templates
and routes together. Every collaborator is constructed here and passed
down explicitly.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from .config import ServerConfig, resolve_paths, resolve_secret_key
from ..auth import AuthService
from ..models import DatabaseManager, log_database, script_database, sensor_database
from ..api.dependencies import AuthDependencies, LoginRequired, login_required_handler
from ..api.queries import LogStore, ScriptStore, SensorStore
from ..api.routes.auth_routes import create_auth_routes
from ..api.routes.dashboard_routes import create_dashboard_routes
from ..api.routes.script_routes import create_script_routes
from ..dashboard.controller import DashboardController
from ..dashboard.timewindow import get_zone
from ..web.template_helpers import setup_template_filters
from ..web.translator import Translator

logger = logging.getLogger("sensorboard.server")

UI_DIR = Path(__file__).resolve().parent.parent / "ui"


def create_app(config: ServerConfig) -> FastAPI:
    """Build the FastAPI app for `config` (opens the databases)."""
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    secret_key = resolve_secret_key(config)
    tz = get_zone(config.timezone)

    db_manager = DatabaseManager(resolve_paths(config))
    db_manager.connect()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        db_manager.close()

    app = FastAPI(title="sensorboard", lifespan=lifespan, docs_url=None, redoc_url=None)
    app.add_middleware(
        SessionMiddleware,
        secret_key=secret_key,
        session_cookie="sensorboard_session",
        same_site="lax",
        https_only=False,
    )
    app.add_exception_handler(LoginRequired, login_required_handler)

    auth_service = AuthService(
        config.users,
        salt=config.password_salt,
        iterations=config.password_iterations,
    )
    auth_deps = AuthDependencies(auth_service)

    controller = DashboardController(
        SensorStore(sensor_database, tz),
        LogStore(log_database, tz),
        ScriptStore(script_database),
        tz,
        log_page_size=config.log_page_size,
        script_log_page_size=config.script_log_page_size,
        default_log_level=config.default_log_level,
        graph_default_days=config.graph_default_days,
    )

    translator = Translator.for_language(config.language)
    templates = Jinja2Templates(directory=str(UI_DIR))
    setup_template_filters(templates, translator, tz)

    app.include_router(create_auth_routes(auth_deps, templates))
    app.include_router(create_dashboard_routes(auth_deps, controller, templates))
    app.include_router(create_script_routes(auth_deps, controller, templates))

    app.state.config = config
    app.state.db_manager = db_manager
    app.state.controller = controller

    if not config.users:
        logger.warning("no users configured, nobody can sign in")
    logger.info(f"sensorboard ready (timezone {config.timezone}, language {config.language})")
    return app
