"""REST API for moneytrack."""

from moneytrack.api.app import create_app

__all__ = ["create_app"]
