# user_service/adapters/api/__init__.py
"""
HTTP Adapter (Driving side).

Exposes the User use cases over a JSON/HTTP API built with FastAPI.
The application is assembled by `main.create_app()`.
"""
