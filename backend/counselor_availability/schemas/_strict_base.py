"""Strict schema baselines with forbidden extras by default."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Neutral strict base for response DTOs."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class StrictRequestModel(StrictModel):
    """Request DTO base that always forbids unexpected fields.

    Payloads arrive in camelCase from the dashboard; snake_case field names are
    accepted as well.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)
