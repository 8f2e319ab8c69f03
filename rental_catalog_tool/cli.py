"""CLI entry point for rental-catalog-tool."""

import click

from rental_catalog_tool.catalog.commands.availability_commands import available_command
from rental_catalog_tool.catalog.commands.entity_commands import (
    booking_group,
    car_group,
    delegation_group,
    user_group,
)
from rental_catalog_tool.catalog.commands.table_commands import (
    create_table_command,
    drop_table_command,
    table_exists_command,
)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Car-rental catalogue (delegations, cars, bookings, users) on a single DynamoDB table"""
    pass


# Register table commands
main.add_command(create_table_command)
main.add_command(drop_table_command)
main.add_command(table_exists_command)

# Register entity groups
main.add_command(delegation_group)
main.add_command(car_group)
main.add_command(booking_group)
main.add_command(user_group)

# Register availability search
main.add_command(available_command)

if __name__ == "__main__":
    main()
