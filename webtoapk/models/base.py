"""Base model for all webtoapk Pydantic models.

This module provides a base model class that enforces consistent serialization
behavior across all webtoapk models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class WebToAPKBaseModel(BaseModel):
    """Base model class for all webtoapk Pydantic models.

    Fields are declared in snake_case and accept their camelCase alias, so
    configuration files written for the Node.js tool chain load unchanged.
    """

    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_assignment=True,
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary with consistent serialization parameters.

        Returns:
            Dictionary representation using JSON-compatible serialization
        """
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")

    def to_dict_full(self) -> dict[str, Any]:
        """Convert model to dictionary including all fields (even unset ones).

        Returns:
            Dictionary representation including all fields
        """
        return self.model_dump(by_alias=True, exclude_unset=False, mode="json")
