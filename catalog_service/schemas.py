"""Request validation for the product endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductModel(BaseModel):
    """Schema for validating new product payloads."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(..., alias="productId", min_length=1)
    product_name: str = Field("", alias="productName")
    product_description: str = Field("", alias="productDescription")
    is_active: bool = Field(False, alias="isActive")

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ProductUpdateModel(BaseModel):
    """Schema for partial product updates; unset fields are left alone."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: Optional[str] = Field(None, alias="productId", min_length=1)
    product_name: Optional[str] = Field(None, alias="productName")
    product_description: Optional[str] = Field(None, alias="productDescription")
    is_active: Optional[bool] = Field(None, alias="isActive")

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
