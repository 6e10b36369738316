from pydantic import BaseModel
from typing import Any, Optional

class APIResponse(BaseModel):
    """Envelope returned by every JSON endpoint."""
    success: bool
    message: str
    data: Optional[Any] = None

class TokenResponse(APIResponse):
    pass

class UserResponse(APIResponse):
    pass

class InventoryResponse(APIResponse):
    pass

class SaleResponse(APIResponse):
    pass

class PartnerResponse(APIResponse):
    pass

class ReportResponse(APIResponse):
    pass

class CatalogResponse(APIResponse):
    pass

class ContactResponse(APIResponse):
    pass
