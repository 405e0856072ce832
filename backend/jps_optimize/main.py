"""
jps-optimize HTTP service: read-only site optimization status.
"""

from typing import Optional

from fastapi import FastAPI

from . import __version__
from .config import ToolsConfig, load_config
from .routes import optimize


def create_app(config: Optional[ToolsConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Tools configuration (default: load_config())
    """
    app = FastAPI(title="JPS Optimize", version=__version__)
    app.state.config = config if config is not None else load_config()
    app.include_router(optimize.router)
    return app
