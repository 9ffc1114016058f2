# user_service/adapters/__init__.py
"""
Infrastructure Adapters.

This package contains the concrete implementations of the Ports defined in
`user_service.core.ports`:
- `api`: The Primary Adapter (Driving) - FastAPI web server.
- `persistence`: Secondary Adapters (Driven) - SQL database and in-memory storage.
"""
