"""Exceptions raised by the genealogy package."""


class GenealogyError(Exception):
    """Base class for ancestry resolution errors."""


class ConfigurationError(GenealogyError, ValueError):
    """Invalid genealogist configuration, detected at construction time."""


class BackingStoreError(GenealogyError):
    """The DTree backing store could not answer a parent lookup.

    Lookups are never retried by the genealogists; the error aborts the
    whole batch and the caller decides whether to retry it.
    """

    def __init__(self, message: str, node_ids=None):
        super().__init__(message)
        self.node_ids = node_ids
