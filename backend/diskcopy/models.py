from typing import List, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DiskRole(str, Enum):
    OS = "os"
    DATA = "data"


class MigrationTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    subscription_id: str
    resource_group_name: str


class DiskDescriptor(BaseModel):
    """Snapshot of a source managed disk, taken when the VM is read."""
    model_config = ConfigDict(frozen=True)

    source_id: str
    source_name: str
    role: DiskRole
    index: Optional[int] = Field(None, description="1-based attachment position for data disks")
    size_gb: int
    location: str
    sku_name: str
    os_type: Optional[str] = None


class NewDiskSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_resource_id: str
    disk_name: str
    location: str
    sku_name: str
    os_type: Optional[str] = Field(None, description="Only set for the OS disk")
    size_gb: int
    create_option: str = "Copy"
    role: DiskRole
    source_size_gb: int
    target: MigrationTarget


class MigrationRequest(BaseModel):
    subscription_id: str = Field(..., min_length=1)
    resource_group_name: str = Field(..., min_length=1)
    vm_name: str = Field(..., min_length=1)
    target_subscription_id: Optional[str] = None
    target_resource_group_name: Optional[str] = None
    dry_run: bool = False
    wait: bool = Field(default=True, description="Block until each copy finishes provisioning")


class SkippedDisk(BaseModel):
    name: Optional[str]
    reason: str


class MigrationPlan(BaseModel):
    vm_name: str
    source: MigrationTarget
    target: MigrationTarget
    disks: List[NewDiskSpec] = Field(default_factory=list)
    skipped: List[SkippedDisk] = Field(default_factory=list)

    @property
    def cross_subscription(self) -> bool:
        return self.source.subscription_id.lower() != self.target.subscription_id.lower()


class CopiedDisk(BaseModel):
    spec: NewDiskSpec
    disk_id: Optional[str] = None
    provisioning_state: Optional[str] = None


class MigrationResult(BaseModel):
    plan: MigrationPlan
    copied: List[CopiedDisk] = Field(default_factory=list)
    resource_group_created: bool = False
    dry_run: bool = False
