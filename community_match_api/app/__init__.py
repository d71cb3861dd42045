"""
Application package initializer.

The backend lets members register with a city and the services they
offer or need, finds other members in the same city who can help,
and supports direct messages and password resets.  Each concern
(accounts, catalog, matching, messaging, password reset) has its own
service module under ``services`` and a router under
``api/v1/endpoints``.
"""

from .main import app  # noqa: F401
