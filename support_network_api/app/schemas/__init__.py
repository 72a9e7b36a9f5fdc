"""
Pydantic schema definitions for API payloads.

Each concept defines its own request and response models.  Schemas are
separated from the database tables to decouple the API representation
from persistence.
"""
