import json

from azure.core.exceptions import HttpResponseError
from click.testing import CliRunner

from diskcopy.cli import main

BASE_ARGS = ["--subscription-id", "sub-a", "--resource-group-name", "rg-a", "--vm-name", "testvm1"]


def test_cli_copies_disks(testvm1):
    result = CliRunner().invoke(main, BASE_ARGS)
    assert result.exit_code == 0, result.output
    assert "testvm1-osdisk" in result.output
    assert "testvm1-datadisk01" in result.output
    assert len(testvm1.copies) == 2


def test_cli_dry_run_json(testvm1):
    result = CliRunner().invoke(main, BASE_ARGS + ["--dry-run", "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["dry_run"] is True
    assert [d["size_gb"] for d in data["plan"]["disks"]] == [128, 64]
    assert testvm1.copies == []


def test_cli_target_subscription_missing(testvm1):
    result = CliRunner().invoke(main, BASE_ARGS + ["--target-subscription-id", "sub-b"])
    assert result.exit_code == 1
    assert "sub-b" in result.output
    assert testvm1.copies == []


def test_cli_no_wait(testvm1):
    result = CliRunner().invoke(main, BASE_ARGS + ["--no-wait"])
    assert result.exit_code == 0, result.output
    assert [w for *_, w in testvm1.copies] == [False, False]


def test_cli_requires_vm_name():
    result = CliRunner().invoke(main, ["--subscription-id", "sub-a", "--resource-group-name", "rg-a"])
    assert result.exit_code == 2


def test_cli_azure_error_exits_cleanly(testvm1):
    testvm1.failures["create_resource_group"] = HttpResponseError(message="AuthorizationFailed")
    result = CliRunner().invoke(main, BASE_ARGS + ["--target-resource-group-name", "rg-new"])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "AuthorizationFailed" in result.output
    assert testvm1.copies == []
