# backend/photo_catalog/exceptions.py
"""
Exception hierarchy for the photo catalog.

"Not found" is never an exception here: stores return None and the
verification services return a status for it.
"""


class CatalogError(Exception):
    """Base exception for all photo catalog errors."""

    pass


class BlobStoreError(CatalogError):
    """A head/get/put/delete/list call against the blob store failed."""

    pass


class MetadataStoreError(CatalogError):
    """The metadata store is unreachable or a query failed."""

    pass


class InvalidInputError(CatalogError):
    """Structurally invalid request (bad batch payload, unsafe blob key)."""

    pass


class ExistenceCheckError(CatalogError):
    """The existence check could not reach a verdict."""

    def __init__(self, identifier: str, message: str):
        super().__init__(f"existence check failed for {identifier}: {message}")
        self.identifier = identifier


class DeadlineExceeded(CatalogError):
    """The request deadline expired before the operation could complete."""

    pass
