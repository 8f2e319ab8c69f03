"""
Store settings resolved from command-line options and environment.
"""

from dataclasses import dataclass

from .constants import DEFAULT_TABLE_NAME, INDEX_STRATEGY_GSI, INDEX_STRATEGY_SCAN
from .core.catalog import Catalog
from .core.client import DynamoDBClient
from .utils import validate_table_name

ENV_TABLE = "CATALOG_TABLE"
ENV_ENDPOINT_URL = "CATALOG_ENDPOINT_URL"
ENV_INDEX_STRATEGY = "CATALOG_INDEX_STRATEGY"
ENV_REGION = "AWS_REGION"
ENV_PROFILE = "AWS_PROFILE"


@dataclass(frozen=True)
class StoreSettings:
    """Where the catalogue table lives and how reverse lookups run."""

    table_name: str = DEFAULT_TABLE_NAME
    region: str | None = None
    profile: str | None = None
    endpoint_url: str | None = None
    index_strategy: str = INDEX_STRATEGY_GSI

    def __post_init__(self) -> None:
        validate_table_name(self.table_name)
        if self.index_strategy not in (INDEX_STRATEGY_GSI, INDEX_STRATEGY_SCAN):
            raise ValueError(
                f"Unknown index strategy '{self.index_strategy}' (expected 'gsi' or 'scan')"
            )


def open_catalog(settings: StoreSettings) -> Catalog:
    """Connect a catalogue to the DynamoDB table described by settings."""
    client = DynamoDBClient(
        settings.table_name,
        region=settings.region,
        profile=settings.profile,
        endpoint_url=settings.endpoint_url,
    )
    return Catalog(client, settings.index_strategy)
