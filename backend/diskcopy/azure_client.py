import logging
import os
from typing import List, Optional, Dict, Any

from azure.core.exceptions import ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.mgmt.compute import ComputeManagementClient
from azure.mgmt.compute.models import CreationData, Disk, DiskCreateOption, DiskSku
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.subscription import SubscriptionClient

from .cache import ttl_cache
from .exceptions import ConfigurationError
from .models import NewDiskSpec

logger = logging.getLogger("diskcopy.azure_client")


def get_default_credential() -> DefaultAzureCredential:
    # Azure CLI login, managed identity or AZURE_CLIENT_ID/SECRET env vars.
    return DefaultAzureCredential(
        exclude_interactive_browser_credential=False
    )


def get_subscription_client(credential: Optional[DefaultAzureCredential] = None) -> SubscriptionClient:
    cred = credential or get_default_credential()
    return SubscriptionClient(cred)


@ttl_cache()
def list_subscriptions() -> List[Dict[str, Any]]:
    """Subscriptions visible to the credential, cached for CACHE_TTL_SECONDS (default 5 minutes)."""
    client = get_subscription_client()
    subs: List[Dict[str, Any]] = []
    for s in client.subscriptions.list():
        subs.append({
            "subscription_id": s.subscription_id,
            "display_name": getattr(s, "display_name", None),
            "state": str(getattr(s, "state", "")),
            "tenant_id": getattr(s, "tenant_id", None)
        })
    return subs


def get_default_subscription_id() -> Optional[str]:
    env_sub = os.getenv("AZURE_SUBSCRIPTION_ID") or os.getenv("SUBSCRIPTION_ID")
    if env_sub:
        return env_sub

    subs = list_subscriptions()
    return subs[0]["subscription_id"] if subs else None


def subscription_exists(subscription_id: str) -> bool:
    wanted = (subscription_id or "").lower()
    return any((s.get("subscription_id") or "").lower() == wanted for s in list_subscriptions())


def get_compute_client(subscription_id: str) -> ComputeManagementClient:
    if not subscription_id:
        raise ConfigurationError("No Azure subscription given. Login with 'az login' or set AZURE_SUBSCRIPTION_ID.")
    return ComputeManagementClient(get_default_credential(), subscription_id)


def get_resource_client(subscription_id: str) -> ResourceManagementClient:
    if not subscription_id:
        raise ConfigurationError("No Azure subscription given. Login with 'az login' or set AZURE_SUBSCRIPTION_ID.")
    return ResourceManagementClient(get_default_credential(), subscription_id)


def resource_group_exists(subscription_id: str, name: str) -> bool:
    client = get_resource_client(subscription_id)
    return bool(client.resource_groups.check_existence(name))


def create_resource_group(subscription_id: str, name: str, location: str) -> Dict[str, Any]:
    client = get_resource_client(subscription_id)
    rg = client.resource_groups.create_or_update(name, {"location": location})
    logger.info(f"Created resource group {name} in {location} (subscription {subscription_id})")
    return {"id": rg.id, "name": rg.name, "location": rg.location}


def _disk_ref(disk: Any) -> Dict[str, Any]:
    managed = getattr(disk, "managed_disk", None)
    return {
        "name": getattr(disk, "name", None),
        "lun": getattr(disk, "lun", None),
        "managed_disk_id": getattr(managed, "id", None) if managed is not None else None,
    }


def get_virtual_machine(subscription_id: str, resource_group: str, name: str) -> Optional[Dict[str, Any]]:
    """Return the VM's disk references, or None when the VM does not exist.

    Shape: { name, location, os_disk: {name, lun, managed_disk_id}, data_disks: [...] }
    Data disks keep the order the VM reports them in.
    """
    compute = get_compute_client(subscription_id)
    try:
        vm = compute.virtual_machines.get(resource_group, name)
    except ResourceNotFoundError:
        return None
    storage = getattr(vm, "storage_profile", None)
    os_disk = getattr(storage, "os_disk", None)
    return {
        "name": vm.name,
        "location": vm.location,
        "os_disk": _disk_ref(os_disk) if os_disk is not None else None,
        "data_disks": [_disk_ref(d) for d in (getattr(storage, "data_disks", None) or [])],
    }


def _enum_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(getattr(value, "value", value))


def get_managed_disk(subscription_id: str, resource_group: str, disk_name: str) -> Optional[Dict[str, Any]]:
    """Return { id, name, size_gb, location, sku_name, os_type } or None if not found."""
    compute = get_compute_client(subscription_id)
    try:
        d = compute.disks.get(resource_group, disk_name)
    except ResourceNotFoundError:
        logger.debug(f"Managed disk {disk_name} not found in {resource_group}")
        return None
    sku = getattr(d, "sku", None)
    return {
        "id": d.id,
        "name": d.name,
        "size_gb": d.disk_size_gb,
        "location": d.location,
        "sku_name": _enum_value(getattr(sku, "name", None)),
        "os_type": _enum_value(getattr(d, "os_type", None)),
    }


def create_managed_disk_copy(subscription_id: str, resource_group: str, spec: NewDiskSpec, wait: bool = True) -> Dict[str, Any]:
    """Start a server-side copy of spec.source_resource_id into a new managed disk.

    With wait=True the long-running operation is awaited and the new disk's id
    is returned; otherwise only the request is submitted.
    """
    compute = get_compute_client(subscription_id)
    disk = Disk(
        location=spec.location,
        sku=DiskSku(name=spec.sku_name),
        disk_size_gb=spec.size_gb,
        os_type=spec.os_type,
        creation_data=CreationData(
            create_option=DiskCreateOption.COPY,
            source_resource_id=spec.source_resource_id,
        ),
    )
    poller = compute.disks.begin_create_or_update(resource_group, spec.disk_name, disk)
    if not wait:
        return {"id": None, "provisioning_state": poller.status()}
    result = poller.result()
    return {"id": result.id, "provisioning_state": getattr(result, "provisioning_state", None)}
