from typing import List, Optional
from pydantic import StrictInt
from schemas.common import CamelModel

# Request schema for adding or updating a cart line
class CartItemPayload(CamelModel):
    # Strict: JSON booleans and numeric strings are rejected, not coerced
    product_id: StrictInt
    quantity: StrictInt
    size_id: Optional[StrictInt] = None
    design_id: Optional[StrictInt] = None

# Request schema for removing a cart line
class CartRemovePayload(CamelModel):
    product_id: StrictInt

class SizeOut(CamelModel):
    size_id: Optional[int] = None
    label: str
    price: float

class DesignOut(CamelModel):
    design_id: Optional[int] = None
    title: str
    price: float
    image: Optional[str] = None

# Response schema for a single cart line item
class CartItemOut(CamelModel):
    product_id: int
    name: str
    image: Optional[str] = None
    price: float
    quantity: int
    size: Optional[SizeOut] = None
    design: Optional[DesignOut] = None
    line_total: float

# Response schema for the entire cart; id is None when no cart exists
class CartOut(CamelModel):
    id: Optional[int] = None
    items: List[CartItemOut] = []
    subtotal: float = 0
    shipping: float = 0
    total: float = 0
    total_items: int = 0
