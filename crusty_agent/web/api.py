"""
FastAPI Web Server for Crusty Agent.

Serves the host status report to any device on the network:
- /api/status: plain-text report, requires a valid access token
- /: login page, or the status dashboard when a valid token is supplied
- everything else: static files from the configured directory
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from .. import __version__
from ..context import AgentContext
from ..core.errors import Unauthorized
from .pages import dashboard_page, login_page


logger = logging.getLogger(__name__)


def create_app(context: AgentContext) -> FastAPI:
    """Build the HTTP application around an AgentContext."""
    app = FastAPI(
        title="Crusty Agent",
        description="Host status reporting behind an access token",
        version=__version__,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/api/status", response_class=PlainTextResponse)
    async def get_status(token: Optional[str] = None):
        """Full status report for an authorized caller."""
        try:
            username = context.gate.authorize(token)
        except Unauthorized:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid access token",
            )

        logger.debug(f"Status requested by {username}")
        # Collectors block (traffic sampling sleeps), keep them off the loop
        loop = asyncio.get_event_loop()
        report = await loop.run_in_executor(None, context.assembler.assemble)
        return PlainTextResponse(content=report)

    @app.get("/", response_class=HTMLResponse)
    async def root(token: Optional[str] = None):
        """Serve the dashboard shell, or the login page without a valid token."""
        if not token:
            return HTMLResponse(content=login_page())
        try:
            username = context.gate.authorize(token)
        except Unauthorized:
            return HTMLResponse(
                content=login_page("Invalid access token"),
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        return HTMLResponse(content=dashboard_page(username, token))

    # Mount static files last so the routes above take precedence
    static_dir = Path(context.config.server.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir)), name="static")
    else:
        logger.debug(f"Static directory {static_dir} not found, static files disabled")

    return app
