from models.partner import Partner, PartnerMovement, MovementType
from models.user import User, UserRole
from models.catalog import Brand, WatchModel, Reference, CostType
from models.contact import Client, Supplier, ClientTier
from models.inventory import InventoryItem, AdditionalCost, ItemStage, ItemStatus, AcquisitionMode, TriState
from models.sale import Sale, SalePayment, SaleStatus, PaymentMethod
