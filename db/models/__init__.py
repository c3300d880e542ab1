from .user import User, UserRole
from .supplier import Supplier
from .item import Item, ItemKind

from .inventory import StockBalance, StockMovement, Direction, MovementRef
from .goods_receipt import GoodsReceipt, GRLine
from .delivery_note import DeliveryNote, DNLine
from .production import Production
from .audit_log import AuditLog

__all__ = [n for n in dir() if n[:1].isupper()]
