"""
Application package initializer.

The application is split into a thin HTTP layer (``api``), request
and response models (``schemas``) and the scheduling engine
(``services``).  The engine has no knowledge of FastAPI; the HTTP
layer reaches it only through the registry stored on the application
state.
"""

from .main import app  # noqa: F401
