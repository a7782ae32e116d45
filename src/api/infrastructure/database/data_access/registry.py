"""Explicit registry of tenant-owned entity types.

A model participates in tenant isolation only when it is registered here,
normally with the ``@tenant_owned`` class decorator at definition time.
Membership is an exact-type lookup: subclasses and look-alike classes with a
``tenant_id`` attribute are not tenant-owned unless registered themselves.
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T", bound=type)


class TenantOwnedRegistry:
    """Maps tenant-owned entity types to the attribute carrying their tenant."""

    def __init__(self) -> None:
        self._attributes: dict[type, str] = {}

    def register(self, entity_type: type, attribute: str = "tenant_id") -> None:
        """Declare ``entity_type`` as tenant-owned.

        Args:
            entity_type: The mapped model class.
            attribute: Name of the mapped attribute holding the tenant id.

        Raises:
            TypeError: If the class has no such attribute.
            ValueError: If the class is already registered with another attribute.
        """
        if not hasattr(entity_type, attribute):
            raise TypeError(
                f"{entity_type.__name__} has no '{attribute}' attribute to isolate on"
            )
        existing = self._attributes.get(entity_type)
        if existing is not None and existing != attribute:
            raise ValueError(
                f"{entity_type.__name__} already registered with attribute '{existing}'"
            )
        self._attributes[entity_type] = attribute

    def is_tenant_owned(self, entity_type: type) -> bool:
        return entity_type in self._attributes

    def tenant_attribute(self, entity_type: type) -> str:
        """Name of the tenant attribute of a registered type.

        Raises:
            KeyError: If the type is not registered.
        """
        return self._attributes[entity_type]

    def tenant_column(self, entity_type: type) -> Any:
        """The mapped column attribute used in filter criteria."""
        return getattr(entity_type, self.tenant_attribute(entity_type))

    def registered_types(self) -> frozenset[type]:
        return frozenset(self._attributes)


tenant_owned_registry = TenantOwnedRegistry()


def tenant_owned(
    cls: Any = None,
    *,
    attribute: str = "tenant_id",
    registry: TenantOwnedRegistry | None = None,
) -> Any:
    """Class decorator registering a model as tenant-owned.

    Usage:
        @tenant_owned
        class ProductModel(Base, TenantOwnedMixin):
            ...

        @tenant_owned(attribute="org_id", registry=custom_registry)
        class LegacyModel(Base):
            ...
    """
    target = registry or tenant_owned_registry

    def decorate(entity_type: T) -> T:
        target.register(entity_type, attribute=attribute)
        return entity_type

    if cls is not None:
        return decorate(cls)
    return decorate
