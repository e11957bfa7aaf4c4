"""
Domain exceptions for the feed service.
"""


class CatalogError(RuntimeError):
    """Raised when the catalog snapshot cannot be loaded or is invalid"""
    pass


class CatalogNotLoadedError(CatalogError):
    """Raised when the catalog is accessed before init_catalog() ran"""
    pass


class CollectionNotFoundError(LookupError):
    """Raised when a request names a collection that does not exist"""

    def __init__(self, name: str):
        super().__init__(f"Collection not found: {name}")
        self.name = name
