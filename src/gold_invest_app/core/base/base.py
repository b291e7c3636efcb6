from beanie import Document
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Generic, Optional, TypeVar
from uuid import UUID, uuid4


class BaseCollection(Document):
    id: UUID = Field(default_factory=uuid4, alias="_id")

    async def fetch(self):
        """Re-fetch the document from the database to refresh its state."""
        fresh = await self.__class__.get(self.id)
        if fresh:
            # Update fields in-place
            for field in self.__class__.model_fields:
                setattr(self, field, getattr(fresh, field))
        return self


class CamelModel(BaseModel):
    """Base for every payload that crosses the HTTP boundary (camelCase on the wire)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BaseResponse(CamelModel):
    id: UUID


T = TypeVar("T")


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    count: Optional[int] = None
