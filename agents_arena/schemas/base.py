"""Base Pydantic schemas for persisted payloads."""
from pydantic import BaseModel, ConfigDict


class PersistedModel(BaseModel):
    """Base model for JSON documents written to the snapshot store.

    Fields are written under their camelCase aliases and accepted under
    either name. Unknown keys are ignored so that documents written by older
    clients (which carried display-only fields such as colors and avatars)
    still load.

    Usage:
        class MySchema(PersistedModel):
            entry_price: float = Field(alias="entryPrice")
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
