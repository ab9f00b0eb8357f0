"""Command line entry point: copy the managed disks of one VM.

Example:
    diskcopy --subscription-id SUB --resource-group-name rg-a --vm-name vm1 \
        --target-resource-group-name rg-b --dry-run
"""
import logging
import os
import sys

import click
from pydantic import ValidationError

from .exceptions import DiskCopyError
from .models import MigrationRequest, MigrationResult
from .orchestrator import migrate_vm_disks

logger = logging.getLogger("diskcopy.cli")


def _configure_logging(verbose: bool) -> None:
    level = logging.INFO if verbose else os.getenv("DISKCOPY_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _echo_result(result: MigrationResult) -> None:
    plan = result.plan
    click.echo(
        f"VM {plan.vm_name}: {plan.source.subscription_id}/{plan.source.resource_group_name} -> "
        f"{plan.target.subscription_id}/{plan.target.resource_group_name}"
    )
    if result.dry_run:
        click.echo("Dry run, nothing was created.")
    elif result.resource_group_created:
        click.echo(f"Created resource group {plan.target.resource_group_name}.")

    copied = {c.spec.disk_name: c for c in result.copied}
    for spec in plan.disks:
        line = f"  {spec.role.value:<4} {spec.disk_name:<30} {spec.source_size_gb:>5} GB -> {spec.size_gb:>5} GB  {spec.sku_name}"
        done = copied.get(spec.disk_name)
        if done is not None and done.provisioning_state:
            line += f"  [{done.provisioning_state}]"
        click.echo(line)
    for skipped in plan.skipped:
        click.echo(f"  skipped {skipped.name}: {skipped.reason}", err=True)


@click.command()
@click.option("--subscription-id", required=True, help="Subscription containing the VM")
@click.option("--resource-group-name", required=True, help="Resource group containing the VM")
@click.option("--vm-name", required=True, help="Name of the VM whose disks are copied")
@click.option("--target-subscription-id", default=None, help="Defaults to --subscription-id")
@click.option("--target-resource-group-name", default=None, help="Defaults to --resource-group-name")
@click.option("--dry-run", is_flag=True, help="Show the copy plan without creating anything")
@click.option("--no-wait", is_flag=True, help="Do not wait for each copy to finish provisioning")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
def main(
    subscription_id: str,
    resource_group_name: str,
    vm_name: str,
    target_subscription_id: str | None,
    target_resource_group_name: str | None,
    dry_run: bool,
    no_wait: bool,
    as_json: bool,
    verbose: bool,
) -> None:
    """Copy the OS and data disks of a VM into new managed disks."""
    _configure_logging(verbose)
    try:
        request = MigrationRequest(
            subscription_id=subscription_id,
            resource_group_name=resource_group_name,
            vm_name=vm_name,
            target_subscription_id=target_subscription_id,
            target_resource_group_name=target_resource_group_name,
            dry_run=dry_run,
            wait=not no_wait,
        )
    except ValidationError as e:
        raise click.UsageError(str(e))

    try:
        result = migrate_vm_disks(request)
    except DiskCopyError as e:
        logger.debug("Disk copy aborted", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(result.model_dump_json(indent=2))
    else:
        _echo_result(result)


if __name__ == "__main__":
    main()
