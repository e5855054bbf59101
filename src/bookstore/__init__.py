"""Bookstore API.

A FastAPI service for managing book records backed by SQLModel, with
versioned schema migrations and a per-genre discounted price report.
"""

__version__ = "0.1.0"
