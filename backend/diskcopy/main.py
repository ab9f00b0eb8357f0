import os

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .azure_client import list_subscriptions, get_default_subscription_id
from .cache import clear_all_cache
from .exceptions import (
    AzureRequestError,
    ConfigurationError,
    DiskCopyError,
    DiskCopyFailedError,
    DiskNotFoundError,
    InvalidDiskError,
    ResourceGroupNotFoundError,
    SubscriptionNotFoundError,
    TierOutOfRangeError,
    VirtualMachineNotFoundError,
)
from .models import MigrationPlan, MigrationRequest, MigrationResult
from .orchestrator import migrate_vm_disks, plan_migration

app = FastAPI(title="Azure VM Disk Copy", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _http_error(e: DiskCopyError) -> HTTPException:
    if isinstance(e, (SubscriptionNotFoundError, ResourceGroupNotFoundError, VirtualMachineNotFoundError, DiskNotFoundError)):
        return HTTPException(404, str(e))
    if isinstance(e, (TierOutOfRangeError, InvalidDiskError)):
        return HTTPException(422, str(e))
    if isinstance(e, (DiskCopyFailedError, AzureRequestError)):
        return HTTPException(502, str(e))
    if isinstance(e, ConfigurationError):
        return HTTPException(400, str(e))
    return HTTPException(500, str(e))


@app.get("/api/healthz")
def healthz():
    return {"status": "ok"}


@app.get("/api/subscriptions")
def api_subscriptions():
    return list_subscriptions()


@app.get("/api/subscriptions/default")
def api_default_subscription():
    sub_id = get_default_subscription_id()
    if not sub_id:
        raise HTTPException(400, "No Azure subscription available. Login with 'az login' or set AZURE_SUBSCRIPTION_ID.")
    return {"subscription_id": sub_id}


@app.get(
    "/api/subscriptions/{subscription_id}/resource-groups/{resource_group_name}/virtual-machines/{vm_name}/disks",
    response_model=MigrationPlan,
)
def api_vm_disks(subscription_id: str, resource_group_name: str, vm_name: str):
    """Preview the in-place copy plan for a VM's disks (nothing is created)."""
    req = MigrationRequest(
        subscription_id=subscription_id,
        resource_group_name=resource_group_name,
        vm_name=vm_name,
        dry_run=True,
    )
    try:
        return plan_migration(req)
    except DiskCopyError as e:
        raise _http_error(e)


@app.post("/api/migrations/plan", response_model=MigrationPlan)
def api_plan_migration(request: MigrationRequest):
    try:
        return plan_migration(request)
    except DiskCopyError as e:
        raise _http_error(e)


@app.post("/api/migrations", response_model=MigrationResult)
def api_migrate(request: MigrationRequest):
    """Copy the VM's OS and data disks to the (optional) target subscription/resource group.

    Set "dry_run": true to get the result shape without creating anything.
    Set "wait": false to return as soon as each copy has been requested.
    """
    try:
        return migrate_vm_disks(request)
    except DiskCopyError as e:
        raise _http_error(e)


@app.post("/api/cache/clear")
def api_cache_clear():
    """Drop cached Azure metadata (subscription list)."""
    clear_all_cache()
    return {"status": "cleared"}
