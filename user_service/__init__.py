# user_service/__init__.py
"""
User Service - Layered CRUD API for the User resource.

This package contains a Modular Monolith implementation following
Hexagonal Architecture (Ports & Adapters).
"""

__version__ = "1.0.0"
