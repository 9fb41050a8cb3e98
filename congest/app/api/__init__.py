"""
HTTP layer.

The routes in ``endpoints`` validate requests, call into the
:class:`~congest.app.services.registry.ServiceRegistry` stored on the
application state and format its answers.  They hold no scheduling
logic of their own.
"""
