import pytest

from diskcopy.cache import clear_all_cache


def disk_id(subscription_id, resource_group, name):
    return f"/subscriptions/{subscription_id}/resourceGroups/{resource_group}/providers/Microsoft.Compute/disks/{name}"


class FakeAzure:
    """In-memory stand-in for the functions in diskcopy.azure_client."""

    def __init__(self):
        self.subscriptions = {"sub-a"}
        self.resource_groups = {("sub-a", "rg-a")}
        self.vms = {}
        self.disks = {}
        self.created_groups = []
        self.copies = []
        self.copy_error = None
        # azure_client function name -> exception raised by that call
        self.failures = {}
        # disk name -> exception raised when that disk is looked up
        self.disk_errors = {}

    def _fail(self, operation):
        if operation in self.failures:
            raise self.failures[operation]

    def add_disk(self, name, size_gb, sku="Premium_LRS", os_type=None, subscription_id="sub-a", resource_group="rg-a", location="westeurope"):
        self.disks[(subscription_id, resource_group, name)] = {
            "id": disk_id(subscription_id, resource_group, name),
            "name": name,
            "size_gb": size_gb,
            "location": location,
            "sku_name": sku,
            "os_type": os_type,
        }
        return {"name": name, "lun": None, "managed_disk_id": disk_id(subscription_id, resource_group, name)}

    def add_vm(self, name, os_disk, data_disks=(), subscription_id="sub-a", resource_group="rg-a"):
        self.vms[(subscription_id, resource_group, name)] = {
            "name": name,
            "location": "westeurope",
            "os_disk": os_disk,
            "data_disks": list(data_disks),
        }

    # azure_client surface
    def subscription_exists(self, subscription_id):
        self._fail("subscription_exists")
        return subscription_id in self.subscriptions

    def resource_group_exists(self, subscription_id, name):
        self._fail("resource_group_exists")
        return (subscription_id, name) in self.resource_groups

    def create_resource_group(self, subscription_id, name, location):
        self._fail("create_resource_group")
        self.resource_groups.add((subscription_id, name))
        self.created_groups.append((subscription_id, name, location))
        return {"id": f"/subscriptions/{subscription_id}/resourceGroups/{name}", "name": name, "location": location}

    def get_virtual_machine(self, subscription_id, resource_group, name):
        self._fail("get_virtual_machine")
        return self.vms.get((subscription_id, resource_group, name))

    def get_managed_disk(self, subscription_id, resource_group, disk_name):
        if disk_name in self.disk_errors:
            raise self.disk_errors[disk_name]
        return self.disks.get((subscription_id, resource_group, disk_name))

    def create_managed_disk_copy(self, subscription_id, resource_group, spec, wait=True):
        if self.copy_error is not None:
            raise self.copy_error
        self.copies.append((subscription_id, resource_group, spec, wait))
        return {
            "id": disk_id(subscription_id, resource_group, spec.disk_name) if wait else None,
            "provisioning_state": "Succeeded" if wait else "InProgress",
        }


@pytest.fixture(autouse=True)
def _clear_cache():
    clear_all_cache()
    yield
    clear_all_cache()


@pytest.fixture
def fake_azure(monkeypatch):
    fake = FakeAzure()
    for name in (
        "subscription_exists",
        "resource_group_exists",
        "create_resource_group",
        "get_virtual_machine",
        "get_managed_disk",
        "create_managed_disk_copy",
    ):
        monkeypatch.setattr(f"diskcopy.azure_client.{name}", getattr(fake, name))
    return fake


@pytest.fixture
def testvm1(fake_azure):
    os_ref = fake_azure.add_disk("testvm1_OsDisk_1", 100, os_type="Linux")
    data_ref = fake_azure.add_disk("testvm1-data-a", 40, sku="StandardSSD_LRS")
    fake_azure.add_vm("testvm1", os_ref, [data_ref])
    return fake_azure
