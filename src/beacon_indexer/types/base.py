"""Reusable base models for indexer data."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """A strict, immutable pydantic base model."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
    )


class ExplorerModel(BaseModel):
    """
    An immutable base model for payloads returned by the explorer API.

    The explorer returns many fields we never read. Unknown fields are
    ignored, but every declared field must be present with a compatible type.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
    )
