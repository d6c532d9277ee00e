from pydantic import BaseModel, Field, ConfigDict


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: int = Field(..., ge=0, description="Price in paise")
    stock: int = Field(default=0, ge=0)
    is_active: bool = True


class ProductResponse(BaseModel):
    id: int
    name: str
    price: int
    stock: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
