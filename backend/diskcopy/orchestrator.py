"""Copy every managed disk of a VM into new disks.

Planning reads everything from Azure and resolves names, sizes and targets
before anything is created, so a bad input (missing subscription, oversize
disk) aborts with nothing changed. Execution then issues one copy per disk,
sequentially. Each Azure call names its subscription explicitly.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple

from azure.core.exceptions import HttpResponseError
from azure.mgmt.core.tools import parse_resource_id

from . import azure_client
from .exceptions import (
    AzureRequestError,
    DiskCopyFailedError,
    DiskNotFoundError,
    ResourceGroupNotFoundError,
    SubscriptionNotFoundError,
    VirtualMachineNotFoundError,
)
from .models import (
    CopiedDisk,
    DiskRole,
    MigrationPlan,
    MigrationRequest,
    MigrationResult,
    MigrationTarget,
    SkippedDisk,
)
from .planner import build_disk_spec, describe_disk, resolve_target

logger = logging.getLogger("diskcopy.orchestrator")


@contextmanager
def _azure_request(operation: str):
    try:
        yield
    except HttpResponseError as e:
        raise AzureRequestError(operation, e) from e


def _validate_subscriptions(source: MigrationTarget, target: MigrationTarget) -> None:
    with _azure_request("listing subscriptions"):
        source_found = azure_client.subscription_exists(source.subscription_id)
        target_found = source_found
        if target.subscription_id.lower() != source.subscription_id.lower():
            target_found = azure_client.subscription_exists(target.subscription_id)
    if not source_found:
        raise SubscriptionNotFoundError(source.subscription_id, "source")
    if not target_found:
        raise SubscriptionNotFoundError(target.subscription_id, "target")


def _disk_resource_group(ref: Dict[str, Any], default: str) -> str:
    try:
        return parse_resource_id(ref["managed_disk_id"]).get("resource_group") or default
    except (KeyError, TypeError, AttributeError):
        return default


def _find_managed_disk(source: MigrationTarget, ref: Optional[Dict[str, Any]]) -> Tuple[Optional[Dict[str, Any]], str]:
    """Look up the managed disk behind a VM disk reference.

    Returns (record, "") on success, otherwise (None, reason).
    """
    if not ref or not ref.get("name"):
        return None, "disk reference has no name"
    if not ref.get("managed_disk_id"):
        return None, "unmanaged disk (VHD in a storage account)"
    rg = _disk_resource_group(ref, source.resource_group_name)
    try:
        record = azure_client.get_managed_disk(source.subscription_id, rg, ref["name"])
    except HttpResponseError as e:
        return None, f"lookup failed: {e}"
    if record is None:
        return None, f"managed disk not found in resource group {rg}"
    return record, ""


def plan_migration(request: MigrationRequest) -> MigrationPlan:
    """Validate the source and target and compute one NewDiskSpec per disk.

    Raises SubscriptionNotFoundError, ResourceGroupNotFoundError,
    VirtualMachineNotFoundError, DiskNotFoundError (OS disk) or
    TierOutOfRangeError; AzureRequestError for other failed Azure calls.
    Data disks that are unmanaged or whose lookup fails end up in plan.skipped.
    """
    source = MigrationTarget(
        subscription_id=request.subscription_id,
        resource_group_name=request.resource_group_name,
    )
    target = resolve_target(
        request.subscription_id,
        request.resource_group_name,
        request.target_subscription_id,
        request.target_resource_group_name,
    )
    _validate_subscriptions(source, target)

    with _azure_request(f"checking resource group {source.resource_group_name}"):
        source_rg_found = azure_client.resource_group_exists(source.subscription_id, source.resource_group_name)
    if not source_rg_found:
        raise ResourceGroupNotFoundError(source.subscription_id, source.resource_group_name)

    with _azure_request(f"reading virtual machine {request.vm_name}"):
        vm = azure_client.get_virtual_machine(source.subscription_id, source.resource_group_name, request.vm_name)
    if vm is None:
        raise VirtualMachineNotFoundError(source.subscription_id, source.resource_group_name, request.vm_name)

    os_ref = vm.get("os_disk")
    os_record, reason = _find_managed_disk(source, os_ref)
    if os_record is None:
        raise DiskNotFoundError((os_ref or {}).get("name"), reason)
    disks = [build_disk_spec(describe_disk(os_record, DiskRole.OS), target, request.vm_name)]

    skipped: List[SkippedDisk] = []
    for index, ref in enumerate(vm.get("data_disks") or [], start=1):
        record, reason = _find_managed_disk(source, ref)
        if record is None:
            name = (ref or {}).get("name")
            logger.warning(f"Skipping data disk {name} of {request.vm_name}: {reason}")
            skipped.append(SkippedDisk(name=name, reason=reason))
            continue
        disks.append(build_disk_spec(describe_disk(record, DiskRole.DATA, index), target, request.vm_name))

    return MigrationPlan(vm_name=request.vm_name, source=source, target=target, disks=disks, skipped=skipped)


def ensure_resource_group(target: MigrationTarget, location: str) -> bool:
    """Create the target resource group if missing. Returns True when created."""
    with _azure_request(f"checking resource group {target.resource_group_name}"):
        exists = azure_client.resource_group_exists(target.subscription_id, target.resource_group_name)
    if exists:
        return False
    logger.warning(
        f"Target resource group {target.resource_group_name} not found in subscription "
        f"{target.subscription_id}; creating it in {location}"
    )
    with _azure_request(f"creating resource group {target.resource_group_name}"):
        azure_client.create_resource_group(target.subscription_id, target.resource_group_name, location)
    return True


def execute_plan(plan: MigrationPlan, wait: bool = True) -> MigrationResult:
    if not plan.disks:
        return MigrationResult(plan=plan)

    target = plan.target
    created = ensure_resource_group(target, plan.disks[0].location)

    copied: List[CopiedDisk] = []
    for spec in plan.disks:
        logger.info(
            f"Copying {spec.role.value} disk {spec.source_resource_id} -> "
            f"{target.resource_group_name}/{spec.disk_name} ({spec.source_size_gb} GB -> {spec.size_gb} GB, {spec.sku_name})"
        )
        try:
            out = azure_client.create_managed_disk_copy(
                target.subscription_id, target.resource_group_name, spec, wait=wait
            )
        except HttpResponseError as e:
            raise DiskCopyFailedError(spec.disk_name, e) from e
        copied.append(CopiedDisk(spec=spec, disk_id=out.get("id"), provisioning_state=out.get("provisioning_state")))

    return MigrationResult(plan=plan, copied=copied, resource_group_created=created)


def migrate_vm_disks(request: MigrationRequest) -> MigrationResult:
    plan = plan_migration(request)
    if request.dry_run:
        return MigrationResult(plan=plan, dry_run=True)
    return execute_plan(plan, wait=request.wait)
