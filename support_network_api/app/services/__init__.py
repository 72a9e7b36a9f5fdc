"""
Service layer: one module per concept.

Each service owns its tables and knows nothing about the other
concepts.  Cross‑concept behaviour (communities, buddy matching,
comment deletion rules) is composed in ``community_service``,
``buddy_service`` and the endpoint modules.
"""
