"""The parent-lookup interface the genealogists depend on."""

from typing import Iterable, List, NamedTuple, Optional, Protocol, Union


class ParentRow(NamedTuple):
    """A node and the parent the genealogists should climb to."""
    data_id: int
    parent_id: int


class ParentLookupGateway(Protocol):
    """Parent lookups against the node hierarchy.

    Implementations raise :class:`genealogy.errors.BackingStoreError` when
    the store cannot be reached. A node without a record is not an error.
    """

    def get_parent(self, node_id: int) -> Optional[int]:
        """Get the parent of one node, or None if the node does not exist."""
        ...

    def get_parents(self, node_ids: Union[str, Iterable[int]]) -> List[ParentRow]:
        """Get the parents of several nodes, omitting nodes that do not exist."""
        ...
