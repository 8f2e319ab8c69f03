"""
Availability search command.
"""

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..config import StoreSettings, open_catalog
from ..core import keys
from ..exceptions import CatalogError
from ..logging_config import get_logger
from ..utils import output_json, output_text
from .options import fail, store_options

logger = get_logger(__name__)


@click.command("available")
@click.argument("delegation_id")
@click.argument("start_date")
@click.argument("end_date")
@click.option("--vintage", is_flag=True, help="Only cars built before 2000 (default: 2000 and later)")
@store_options
@click.pass_context
def available_command(
    ctx: click.Context,
    delegation_id: str,
    start_date: str,
    end_date: str,
    vintage: bool,
    settings: StoreSettings,
    text: bool,
) -> None:
    """Find cars of a delegation free for a whole date range.

    START_DATE and END_DATE are inclusive, YYYY-MM-DD. A car is free when
    none of its bookings shares a single day with the range. Cars without
    a year are never listed.

    Examples:

    \b
        # Modern cars free from 1 to 5 March
        rental-catalog-tool available 3f2a... 2024-03-01 2024-03-05

    \b
        # Vintage cars only
        rental-catalog-tool available 3f2a... 2024-03-01 2024-03-05 --vintage

    \b
    Output Format:
        Returns JSON with the free cars in store order:
        {"delegationId": "...", "startDate": "...", "endDate": "...",
         "vintage": false, "cars": [...], "count": 2}

    Exit codes: 0 success, 2 invalid or inverted dates, 3 AWS error.
    """
    try:
        logger.info(f"Searching availability in delegation '{delegation_id}'")
        cars = open_catalog(settings).find_available_cars(
            delegation_id, start_date, end_date, vintage_mode=vintage
        )
    except (CatalogError, ValueError, ClientError, BotoCoreError) as e:
        fail(ctx, e, text)

    rows = [keys.to_attributes(car) for car in cars]
    if text:
        if not rows:
            output_text("No cars available")
        for row in rows:
            output_text(
                f"{row['carId']}  {row.get('make', '')} {row.get('model', '')} ({row.get('year')})"
            )
    else:
        output_json(
            {
                "delegationId": delegation_id,
                "startDate": start_date,
                "endDate": end_date,
                "vintage": vintage,
                "cars": rows,
                "count": len(rows),
            }
        )
