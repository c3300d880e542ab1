# dao/item.py
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, List
from sqlalchemy.exc import IntegrityError
from configs import db
from db.models.item import Item, ItemKind
from dao import audit as audit_dao, inventory as inv_dao
from dao.base import commit
from utils.dates import normalize_group, parse_date

logger = logging.getLogger(__name__)

# field được phép sửa theo từng loại
_RM_FIELDS = {"code", "name", "category", "barcode", "group_tag", "threshold", "qty_per_fg", "exclusive"}
_FG_FIELDS = {"code", "name", "volume", "barcode", "group_tag", "threshold", "batch", "expiry"}


def to_kind(value) -> ItemKind:
    if isinstance(value, ItemKind):
        return value
    try:
        return ItemKind((value or "").strip().upper())
    except ValueError:
        raise ValueError(f"Loại hàng không hợp lệ: {value!r} (RM/FG).")


def list_items(kind=None, active_only: bool = True) -> List[Item]:
    q = Item.query
    if kind is not None:
        q = q.filter_by(kind=to_kind(kind))
    if active_only:
        q = q.filter_by(is_active=True)
    return q.order_by(Item.code.asc()).all()


def get_item(item_id: int) -> Optional[Item]:
    return db.session.get(Item, int(item_id))


def get_item_of_kind(item_id, kind) -> Item:
    """Lấy item và kiểm tra đúng loại; sai thì ValueError."""
    kind = to_kind(kind)
    try:
        item = get_item(int(item_id))
    except (TypeError, ValueError):
        raise ValueError("Vui lòng chọn mặt hàng.")
    if not item or not item.is_active:
        raise ValueError(f"Không tìm thấy mặt hàng #{item_id}.")
    if item.kind != kind:
        raise ValueError(f"Mặt hàng #{item_id} không phải {kind.value}.")
    return item


def create_item(kind, actor: str | None = None, **fields) -> Item:
    kind = to_kind(kind)
    allowed = _RM_FIELDS if kind == ItemKind.RM else _FG_FIELDS
    values = _clean_fields(fields, allowed)
    if not values.get("code") or not values.get("name"):
        raise ValueError("Mã và tên mặt hàng là bắt buộc.")

    item = Item(kind=kind, created_by=actor or audit_dao.current_actor(), **values)
    db.session.add(item)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise ValueError(f"Mã {values['code']} đã tồn tại.")
    inv_dao.ensure_balance_row(item.id)
    commit()

    logger.info("Item %s:%s created", kind.value, item.code)
    audit_dao.log_action(f"{kind.value}_ADD", item.id, item.to_dict(), actor=actor)
    return item


def update_item(item_id: int, actor: str | None = None, **fields) -> Item:
    item = get_item(item_id)
    if not item:
        raise LookupError(f"Không tìm thấy mặt hàng #{item_id}.")
    allowed = _RM_FIELDS if item.kind == ItemKind.RM else _FG_FIELDS
    values = _clean_fields(fields, allowed)
    for k, v in values.items():
        setattr(item, k, v)
    try:
        commit()
    except IntegrityError:
        raise ValueError(f"Mã {values.get('code')} đã tồn tại.")

    audit_dao.log_action(f"{item.kind.value}_EDIT", item.id, values, actor=actor)
    return item


def _clean_fields(fields: dict, allowed: set) -> dict:
    out = {}
    for k, v in fields.items():
        if k == "group":
            k = "group_tag"
        if k not in allowed or v is None:
            continue
        if k in ("code", "name") and isinstance(v, str):
            v = v.strip()
        elif k == "group_tag":
            v = normalize_group(v) or None
        elif k in ("threshold", "qty_per_fg"):
            v = _number(v, k)
        elif k == "expiry":
            v = parse_date(v)
        elif k == "exclusive":
            v = str(v).strip().lower() in ("1", "true", "on", "yes")
        out[k] = v
    return out


def _number(v, field: str) -> Decimal:
    try:
        n = Decimal(str(v).strip() or "0")
    except InvalidOperation:
        raise ValueError(f"{field} phải là số.")
    if not n.is_finite():
        raise ValueError(f"{field} phải là số.")
    if n < 0:
        raise ValueError(f"{field} không được âm.")
    return n
