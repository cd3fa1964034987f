# backend/schemas/product.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List


# Base configuration for reading domain objects
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    price: int = Field(gt=0)
    cost_price: Optional[int] = Field(default=None, ge=0)
    discount_price: Optional[int] = Field(default=None, gt=0)
    stock: int = Field(default=0, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    shopee_id: Optional[str] = None

    @model_validator(mode="after")
    def _discount_below_price(self):
        if self.discount_price is not None and self.discount_price >= self.price:
            raise ValueError("discount_price must be lower than price")
        return self


# Schema for creating a new product
class ProductCreate(ProductBase):
    pass


# Schema for partial product updates
class ProductEditRequest(ORMBase):
    """Schema for PATCH requests - all fields optional."""
    name: Optional[str] = Field(None, min_length=1)
    price: Optional[int] = Field(None, gt=0)
    cost_price: Optional[int] = Field(None, ge=0)
    discount_price: Optional[int] = Field(None, gt=0)
    stock: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    shopee_id: Optional[str] = None


# Full product representation including ID
class ProductOut(ORMBase):
    id: str
    name: str
    price: int
    cost_price: Optional[int] = None
    discount_price: Optional[int] = None
    effective_price: int
    stock: int
    category: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    shopee_id: Optional[str] = None


class ProductList(ORMBase):
    items: List[ProductOut]
    total: int


class ProductImportResult(BaseModel):
    imported: int
    skipped: int


class DescriptionRequest(BaseModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None


class DescriptionResponse(BaseModel):
    description: str
