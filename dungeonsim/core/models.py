"""
Shared pydantic bases for catalog records and runtime state.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """
    Base for read-only catalog records.

    Catalog JSON uses camelCase keys; records expose snake_case attributes and
    are frozen once loaded.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class StateModel(BaseModel):
    """
    Base for mutable runtime state (rooms, combatants, battles).

    Same camelCase aliases as the catalogs so snapshots written by the caller
    round-trip through ``model_dump(by_alias=True)``.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=False,
        extra="ignore",
    )
