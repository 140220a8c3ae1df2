"""Shared FastAPI dependencies for the web app."""
from __future__ import annotations

from fastapi import Request

from scoring.service import SubmissionService

from .config import Settings


def get_service(request: Request) -> SubmissionService:
    return request.app.state.service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
