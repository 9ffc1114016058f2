# user_service/shared/__init__.py
"""
Shared Kernel.

Cross-cutting infrastructure used by every layer: configuration, structured
logging, tracing, and the dependency-injection container.
"""
