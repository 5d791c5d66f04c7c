"""Reunion manager: attendees, contributions, budget and expenses behind a JSON API."""

from .main import create_app

__all__ = ["create_app"]
