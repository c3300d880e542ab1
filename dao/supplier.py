from datetime import datetime
from typing import Optional, List
from configs import db
from db.models.supplier import Supplier
from db.models.goods_receipt import GoodsReceipt
from dao import audit as audit_dao
from dao.base import commit

_FIELDS = ("name", "contact", "phone", "email")


def list_suppliers() -> List[Supplier]:
    return Supplier.query.filter_by(is_active=True).order_by(Supplier.name.asc()).all()


def get_supplier(supplier_id: int) -> Optional[Supplier]:
    return db.session.get(Supplier, supplier_id)


def create_supplier(
    name: str,
    contact: str | None = None,
    phone: str | None = None,
    email: str | None = None,
    actor: str | None = None,
) -> Supplier:
    name = (name or "").strip()
    if not name:
        raise ValueError("Tên nhà cung cấp là bắt buộc.")
    actor = actor or audit_dao.current_actor()
    s = Supplier(name=name, contact=contact, phone=phone, email=email, created_by=actor)
    db.session.add(s)
    commit()
    audit_dao.log_action(
        "SUPPLIER_ADD", s.id, {k: getattr(s, k) for k in _FIELDS}, actor=actor
    )
    return s


def update_supplier(supplier_id: int, actor: str | None = None, **fields) -> Supplier:
    s = get_supplier(supplier_id)
    if not s:
        raise LookupError(f"Không tìm thấy nhà cung cấp #{supplier_id}.")
    changes = {k: v for k, v in fields.items() if k in _FIELDS and v is not None}
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        if not changes["name"]:
            raise ValueError("Tên nhà cung cấp là bắt buộc.")
    actor = actor or audit_dao.current_actor()
    for k, v in changes.items():
        setattr(s, k, v)
    s.updated_at = datetime.utcnow()
    s.updated_by = actor
    commit()
    audit_dao.log_action("SUPPLIER_EDIT", s.id, changes, actor=actor)
    return s


def delete_supplier(supplier_id: int, actor: str | None = None) -> bool:
    sup = get_supplier(supplier_id)
    if not sup or not sup.is_active:
        return False
    snapshot = sup.to_dict()
    if GoodsReceipt.query.filter_by(supplier_id=supplier_id).count() > 0:
        # đã có GRN tham chiếu -> chỉ ẩn
        sup.is_active = False
    else:
        db.session.delete(sup)
    commit()
    audit_dao.log_action("SUPPLIER_DELETE", supplier_id, snapshot, actor=actor)
    return True
