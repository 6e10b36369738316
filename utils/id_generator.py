import uuid

# Prefixes keep ids readable in exports and logs
ITEM_PREFIX = "W"
COST_PREFIX = "CT"
SALE_PREFIX = "S"
PAYMENT_PREFIX = "PAY"
PARTNER_PREFIX = "P"
MOVEMENT_PREFIX = "M"
BRAND_PREFIX = "B"
MODEL_PREFIX = "MD"
REFERENCE_PREFIX = "R"
COST_TYPE_PREFIX = "TC"
CLIENT_PREFIX = "C"
SUPPLIER_PREFIX = "SP"
USER_PREFIX = "U"


def generate_id(prefix: str) -> str:
    """Generate a short unique id such as ``W-3F9A1C2B7D``."""
    return f"{prefix}-{uuid.uuid4().hex[:10].upper()}"
