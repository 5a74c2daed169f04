"""
Base schema classes with common configurations.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

__all__ = [
    "BaseSchema",
    "CamelSchema",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All engine-facing schemas inherit from this to get consistent
    behaviour (attribute loading, enum handling, assignment validation).
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        # Keep enums as Enum instances; JSON dumps still emit `.value`.
        use_enum_values=False,
        arbitrary_types_allowed=True,
        validate_assignment=True,
    )


class CamelSchema(BaseSchema):
    """
    Schema serialised with camelCase keys.

    Fields are declared in snake_case and populated either way;
    ``model_dump(by_alias=True)`` produces the external key style.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
