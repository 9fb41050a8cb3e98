"""
Endpoint modules.

Each module defines an APIRouter aggregated in ``router.py``.
"""
