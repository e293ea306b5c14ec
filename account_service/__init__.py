"""
Account Service Application: root package.

This package contains the FastAPI app entry point (main.py), API routes,
the session workflow use cases, domain models and the MongoDB and media
storage infrastructure.
"""
