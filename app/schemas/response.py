from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Optional
import uuid


def _rid():
    return uuid.uuid4().hex


class CamelModel(BaseModel):
    """Wire models use camelCase keys (orderNumber, paymentStatus, ...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class SuccessResponse(BaseModel):
    """Simple success response wrapper with just data, success, and request_id"""
    success: Optional[bool] = Field(default=True)
    request_id: str = Field(default_factory=_rid)
    message: Optional[str] = None
    data: Optional[Any] = None
