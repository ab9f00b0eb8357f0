"""Pure planning helpers: where a copy goes, what it is called and how big it is."""
from typing import Any, Dict, Optional

from .exceptions import InvalidDiskError, TierOutOfRangeError
from .models import DiskDescriptor, DiskRole, MigrationTarget, NewDiskSpec
from .naming import data_disk_name, os_disk_name
from .tiers import resolve_tier_size


def resolve_target(
    source_subscription_id: str,
    source_resource_group: str,
    target_subscription_id: Optional[str] = None,
    target_resource_group: Optional[str] = None,
) -> MigrationTarget:
    """Fill unset target fields from the source.

    No target at all copies in place; a target subscription alone mirrors the
    source resource group name into that subscription.
    """
    return MigrationTarget(
        subscription_id=target_subscription_id or source_subscription_id,
        resource_group_name=target_resource_group or source_resource_group,
    )


def describe_disk(disk: Dict[str, Any], role: DiskRole, index: Optional[int] = None) -> DiskDescriptor:
    """Build a descriptor from an azure_client.get_managed_disk() record."""
    return DiskDescriptor(
        source_id=disk["id"],
        source_name=disk["name"],
        role=role,
        index=index if role is DiskRole.DATA else None,
        size_gb=_size_gb(disk),
        location=disk["location"],
        sku_name=disk.get("sku_name") or "",
        os_type=disk.get("os_type") if role is DiskRole.OS else None,
    )


def _size_gb(disk: Dict[str, Any]) -> int:
    size = disk.get("size_gb")
    if isinstance(size, bool) or not isinstance(size, int):
        raise TierOutOfRangeError(size)
    return size


def build_disk_spec(descriptor: DiskDescriptor, target: MigrationTarget, vm_name: str) -> NewDiskSpec:
    if descriptor.role is DiskRole.OS:
        name = os_disk_name(vm_name)
    else:
        if descriptor.index is None or descriptor.index < 1:
            raise InvalidDiskError(descriptor.source_name, "data disk has no 1-based attachment index")
        name = data_disk_name(vm_name, descriptor.index)
    return NewDiskSpec(
        source_resource_id=descriptor.source_id,
        disk_name=name,
        location=descriptor.location,
        sku_name=descriptor.sku_name,
        os_type=descriptor.os_type if descriptor.role is DiskRole.OS else None,
        size_gb=resolve_tier_size(descriptor.size_gb),
        role=descriptor.role,
        source_size_gb=descriptor.size_gb,
        target=target,
    )
