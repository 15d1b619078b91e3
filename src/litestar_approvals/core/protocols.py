"""Core protocols for litestar-approvals.

This module defines the structural interfaces of the collaborators the approval
components depend on without owning: the content store and its resources, and
the runtime-facing step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    from litestar_approvals.core.context import WorkflowContext

__all__ = ["ContentResource", "ContentStore", "Step"]


@runtime_checkable
class ContentResource(Protocol):
    """A content item held by a content store.

    Attributes:
        path: Hierarchical location of the item.
        resource_type: Kind of item, e.g. ``"page"`` or ``"asset"``.
    """

    path: str
    resource_type: str


@runtime_checkable
class ContentStore(Protocol):
    """Protocol for the store holding content items and their properties.

    Property edits made through :meth:`get_mutable_properties` are staged until
    :meth:`commit` is called.

    Example:
        >>> resource = await store.get("/content/site/hr/page")
        >>> if resource is not None:
        ...     properties = await store.get_mutable_properties(resource)
        ...     properties["approvalStatus"] = "approved"
        ...     await store.commit()
    """

    async def get(self, path: str) -> ContentResource | None:
        """Fetch a content item.

        Args:
            path: Location of the item.

        Returns:
            The resource, or None if nothing exists at ``path``.
        """
        ...

    async def get_mutable_properties(self, resource: ContentResource) -> MutableMapping[str, Any] | None:
        """Return the writable property map of a resource.

        Args:
            resource: A resource obtained from :meth:`get`.

        Returns:
            The property map, or None if the resource has no writable properties.
        """
        ...

    async def commit(self) -> None:
        """Persist all staged property edits.

        Raises:
            ContentStoreError: On a write conflict or IO failure.
        """
        ...


@runtime_checkable
class Step(Protocol):
    """Protocol for a component the runtime can execute against a context.

    Attributes:
        name: Unique identifier of the step.
        description: Human-readable description of the step's purpose.
    """

    name: str
    description: str

    async def execute(self, context: WorkflowContext) -> Any:
        """Execute the step against the workflow context."""
        ...
