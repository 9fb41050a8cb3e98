"""
Top‑level package for Congest, the webhook scheduling registry.

Clients register an HTTP call together with a timing rule and the
service invokes that call on schedule until it is deregistered.  All
functionality lives in submodules under ``app``.
"""

__all__ = []
