from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Base for request/response bodies exchanged in camelCase
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )

# Uniform response envelope
class ApiResponse(BaseModel, Generic[T]):
    error: bool = False
    message: str
    data: Optional[T] = None
    details: Optional[str] = None

    # Omit details when empty; nulls inside data are kept
    @model_serializer(mode="wrap")
    def _omit_empty_details(self, handler):
        body = handler(self)
        if body.get("details") is None:
            body.pop("details", None)
        return body
