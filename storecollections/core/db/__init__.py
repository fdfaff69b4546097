"""Local SQLite store for the catalog snapshot and seller collections.

All mixins compose into the Database class via multiple inheritance.
The MRO ensures ConnectionBase.__init__ runs first, then
SchemaMixin._ensure_schema() creates or migrates the schema.
"""

from __future__ import annotations

from storecollections.core.db.collection_queries import CollectionQueryMixin
from storecollections.core.db.connection import ConnectionBase
from storecollections.core.db.membership_queries import MembershipMixin
from storecollections.core.db.product_queries import ProductQueryMixin
from storecollections.core.db.schema import SchemaMixin

__all__ = ["Database"]


class Database(
    SchemaMixin,
    ProductQueryMixin,
    CollectionQueryMixin,
    MembershipMixin,
    ConnectionBase,
):
    """Main database class composing all query mixins.

    Inherits connection management from ConnectionBase, schema handling
    from SchemaMixin, and all query methods from the remaining mixins.
    """

    pass
