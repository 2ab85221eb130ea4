"""HTTP middleware and exception handlers for the game API."""

from fastapi import FastAPI

from wordgame.config import Settings
from wordgame.middleware.cors import setup_cors
from wordgame.middleware.error_handler import setup_error_handlers
from wordgame.middleware.logging import setup_logging
from wordgame.middleware.request_id import RequestIdMiddleware


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Wire logging, error handlers, request ids and CORS onto ``app``.

    The last middleware added runs outermost, so CORS headers reach even
    responses produced by the error handlers.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    setup_cors(app, settings)
