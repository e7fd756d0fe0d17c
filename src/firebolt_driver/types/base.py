"""Base model class for all driver models with serialization support."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class DriverBaseModel(BaseModel):
    """Base model for all driver records.

    Records are immutable once built; the driver replaces them instead of
    mutating them.
    """
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for serialization, dropping unset optionals."""
        return self.model_dump(by_alias=False, exclude_none=True)
