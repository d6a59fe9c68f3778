# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: VectorStoreErrors
# -----------------------------------------------------------------------------


class ConfigurationError(RuntimeError):
    """Wiring or environment problem; never recovered from at runtime."""


class SchemaMismatchError(ConfigurationError):
    """Stored collection was created with a different schema than the code expects."""

    def __init__(self, collection_name: str, expected: str, actual: str | None):
        self.collection_name = collection_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Schema mismatch for collection '{collection_name}': "
            f"expected fingerprint {expected!r}, found {actual!r}"
        )


class CollectionNotFoundError(LookupError):
    def __init__(self, collection_name: str):
        self.collection_name = collection_name
        super().__init__(f"Collection {collection_name} does not exist")
