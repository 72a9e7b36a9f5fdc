"""
Application package initializer.

The project is organised as a set of small, independent concepts
(users, posting, friending, labeling, grouping, matching, messaging,
commenting).  Each concept lives in its own service module under
``services`` and is exposed by a router in ``api/v1/endpoints``.  The
endpoint modules are also where concepts are composed, e.g. creating a
community creates two labels and joins the creator to one of them.
"""

from .main import app  # noqa: F401
