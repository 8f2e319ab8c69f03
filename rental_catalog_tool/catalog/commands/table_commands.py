"""
Table management commands for the catalogue.
"""

from typing import Literal

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..config import StoreSettings
from ..core.table_operations import check_table_exists, create_table, drop_table
from ..exceptions import CatalogError, TableAlreadyExistsError
from ..logging_config import get_logger
from ..utils import error_json, error_text, output_json, output_text
from .options import fail, store_options

logger = get_logger(__name__)


@click.command("create-table")
@click.option(
    "--billing",
    type=click.Choice(["on-demand", "provisioned"]),
    default="on-demand",
    help="Billing mode (default: on-demand)",
)
@store_options
@click.pass_context
def create_table_command(
    ctx: click.Context,
    billing: str,
    settings: StoreSettings,
    text: bool,
) -> None:
    """Create the catalogue table.

    Creates a table with partition key (PK), sort key (SK) and one global
    secondary index per reverse lookup (carId, userId, delegationId).

    Examples:

    \b
        # Create table with default name
        rental-catalog-tool create-table

    \b
        # Create against DynamoDB Local
        rental-catalog-tool create-table --endpoint-url http://localhost:8000

    \b
    Output Format:
        Returns JSON with table details:
        {"table": "...", "status": "CREATING", "arn": "..."}
    """
    try:
        logger.info(f"Creating table '{settings.table_name}'")
        logger.debug(f"Region: {settings.region}, Billing: {billing}")

        billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = (
            "PAY_PER_REQUEST" if billing == "on-demand" else "PROVISIONED"
        )
        table_desc = create_table(
            settings.table_name,
            settings.region,
            settings.profile,
            billing_mode,
            endpoint_url=settings.endpoint_url,
        )

        if text:
            output_text(f"Table '{settings.table_name}' created")
            output_text(f"Status: {table_desc['TableStatus']}")
            output_text(f"ARN: {table_desc['TableArn']}")
        else:
            output_json(
                {
                    "table": settings.table_name,
                    "status": table_desc["TableStatus"],
                    "arn": table_desc["TableArn"],
                }
            )

    except TableAlreadyExistsError as e:
        solution = "Use a different table name or drop the existing table"
        if text:
            click.echo(error_text(str(e), solution), err=True)
        else:
            click.echo(error_json(str(e), solution, 1), err=True)
        ctx.exit(1)

    except (CatalogError, ClientError, BotoCoreError) as e:
        fail(ctx, e, text)


@click.command("drop-table")
@click.option("--approve", is_flag=True, help="Required flag to confirm table deletion")
@store_options
@click.pass_context
def drop_table_command(
    ctx: click.Context,
    approve: bool,
    settings: StoreSettings,
    text: bool,
) -> None:
    """Drop the catalogue table.

    WARNING: This permanently deletes the table and every delegation, car,
    booking and user in it.

    \b
    Output Format:
        Returns JSON with confirmation:
        {"table": "...", "status": "DELETING"}
    """
    if not approve:
        solution = (
            f"Add --approve flag to confirm: "
            f"rental-catalog-tool drop-table --table {settings.table_name} --approve"
        )
        if text:
            click.echo(error_text("Table deletion requires approval", solution), err=True)
        else:
            click.echo(error_json("Table deletion requires approval", solution, 2), err=True)
        ctx.exit(2)

    try:
        logger.info(f"Dropping table '{settings.table_name}'")
        table_desc = drop_table(
            settings.table_name, settings.region, settings.profile, settings.endpoint_url
        )

        if text:
            output_text(f"Table '{settings.table_name}' deletion initiated")
            output_text(f"Status: {table_desc['TableStatus']}")
        else:
            output_json({"table": settings.table_name, "status": table_desc["TableStatus"]})

    except (CatalogError, ClientError, BotoCoreError) as e:
        fail(ctx, e, text)


@click.command("table-exists")
@store_options
@click.pass_context
def table_exists_command(ctx: click.Context, settings: StoreSettings, text: bool) -> None:
    """Check if the catalogue table exists.

    Exit codes: 0 exists, 1 missing, 3 AWS error.
    """
    try:
        exists = check_table_exists(
            settings.table_name, settings.region, settings.profile, settings.endpoint_url
        )
    except (ClientError, BotoCoreError) as e:
        fail(ctx, e, text)

    if text:
        state = "exists" if exists else "does not exist"
        output_text(f"Table '{settings.table_name}' {state}")
    else:
        output_json({"table": settings.table_name, "exists": exists})
    if not exists:
        ctx.exit(1)
