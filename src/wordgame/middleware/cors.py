"""CORS for the Expo/React Native dev servers and the web build."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wordgame.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    # Browsers reject credentials with a wildcard origin
    wildcard = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else settings.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id"],
    )
