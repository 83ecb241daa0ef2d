"""Books Directory API.

CRUD, search, filter and facet endpoints over a catalog of book records.
"""

__version__ = "0.1.0"
