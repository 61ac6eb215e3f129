from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


class SystemFieldOption(BaseModel):
    id: Optional[int] = None
    slug: Optional[str] = None
    title: Optional[str] = None

    # Allow extra fields for forward compatibility
    model_config = {"extra": "ignore"}

    @property
    def label(self) -> str:
        """展示用名称: title > slug > id"""
        if self.title:
            return self.title
        if self.slug:
            return self.slug
        return str(self.id) if self.id else ""


class SystemField(BaseModel):
    slug: Optional[str] = None
    title: Optional[str] = None
    options: List[SystemFieldOption] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("options", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return value or []


class BaseResponse(BaseModel, Generic[T]):
    # Qase envelope: { "status": true, "result": ... } / { "status": false, "errorMessage": ... }
    status: bool = True
    result: Optional[T] = None
    error_message: Optional[str] = Field(default=None, alias="errorMessage")

    model_config = {"extra": "ignore", "populate_by_name": True}

    @property
    def is_success(self) -> bool:
        return self.status


class SystemFieldListResponse(BaseResponse[List[SystemField]]):
    pass
