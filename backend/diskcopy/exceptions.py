"""Errors raised while planning or executing a VM disk copy.

Every fatal condition derives from DiskCopyError so callers (HTTP API, CLI)
can catch one type. Data disks that cannot be resolved are not errors; they
are reported on the plan as skipped disks.
"""
from typing import Optional


class DiskCopyError(Exception):
    """Base class for fatal disk copy errors."""


class ConfigurationError(DiskCopyError):
    pass


class SubscriptionNotFoundError(DiskCopyError):
    def __init__(self, subscription_id: str, role: str = "source"):
        self.subscription_id = subscription_id
        self.role = role
        super().__init__(f"{role.capitalize()} subscription {subscription_id} not found or not accessible.")


class ResourceGroupNotFoundError(DiskCopyError):
    def __init__(self, subscription_id: str, resource_group_name: str):
        self.subscription_id = subscription_id
        self.resource_group_name = resource_group_name
        super().__init__(f"Resource group {resource_group_name} not found in subscription {subscription_id}.")


class VirtualMachineNotFoundError(DiskCopyError):
    def __init__(self, subscription_id: str, resource_group_name: str, vm_name: str):
        self.subscription_id = subscription_id
        self.resource_group_name = resource_group_name
        self.vm_name = vm_name
        super().__init__(
            f"Virtual machine {vm_name} not found in resource group {resource_group_name} "
            f"(subscription {subscription_id})."
        )


class DiskNotFoundError(DiskCopyError):
    def __init__(self, disk_name: Optional[str], detail: str = "managed disk not found"):
        self.disk_name = disk_name
        super().__init__(f"Disk {disk_name or '<unnamed>'}: {detail}.")


class TierOutOfRangeError(DiskCopyError, ValueError):
    """Disk size falls outside the 1-2048 GB tier table."""

    def __init__(self, size_gb):
        self.size_gb = size_gb
        super().__init__(f"Disk size {size_gb} GB is outside the supported tier range (1-2048 GB).")


class DiskCopyFailedError(DiskCopyError):
    def __init__(self, disk_name: str, cause: Exception):
        self.disk_name = disk_name
        self.cause = cause
        super().__init__(f"Copy to {disk_name} failed: {cause}")


class AzureRequestError(DiskCopyError):
    """An Azure control-plane call failed outside the copy step (403, throttling, ...)."""

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Azure request failed while {operation}: {cause}")


class InvalidDiskError(DiskCopyError):
    def __init__(self, disk_name: Optional[str], detail: str):
        self.disk_name = disk_name
        super().__init__(f"Disk {disk_name or '<unnamed>'}: {detail}.")
