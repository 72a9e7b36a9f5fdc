"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one concept.  Handlers resolve the
caller from the session, translate usernames to ids and compose the
concept services; the routers are aggregated in ``router.py``.
"""
