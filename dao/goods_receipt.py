# dao/goods_receipt.py
import logging
from typing import List, Dict, Optional
from configs import db
from db.models.goods_receipt import GoodsReceipt, GRLine
from db.models.inventory import Direction, MovementRef
from db.models.item import ItemKind
from db.models.supplier import Supplier
from dao import audit as audit_dao, inventory as inv_dao, item as item_dao
from utils.dates import parse_date, today
from utils.ids import gen_id

logger = logging.getLogger(__name__)


# ---------- public APIs ----------
def list_grns() -> List[GoodsReceipt]:
    return GoodsReceipt.query.order_by(
        GoodsReceipt.created_at.desc(), GoodsReceipt.id.desc()
    ).all()


def get_grn(gr_id: str) -> Optional[GoodsReceipt]:
    return db.session.get(GoodsReceipt, gr_id)


def create_grn(
    bill_no: str | None,
    date,
    supplier_id,
    lines: List[Dict],
    actor: str | None = None,
) -> GoodsReceipt:
    """
    Tạo GRN và nhập kho: mỗi dòng -> 1 movement IN trên RM, ref_id = id GRN.
    Chứng từ + movement + tồn được commit cùng 1 transaction.
    """
    supplier = _get_supplier(supplier_id)
    norm_lines = normalize_lines(lines, ItemKind.RM)
    doc_date = parse_date(date, default=today())
    actor = actor or audit_dao.current_actor()

    gr_id = gen_id("grn")
    bill_no = (bill_no or "").strip() or f"GRN-{gr_id[-6:].upper()}"

    try:
        gr = GoodsReceipt(
            id=gr_id,
            bill_no=bill_no,
            date=doc_date,
            supplier_id=supplier.id,
            supplier_name=supplier.name,
            created_by=actor,
        )
        db.session.add(gr)
        db.session.flush()

        for pos, ln in enumerate(norm_lines):
            db.session.add(
                GRLine(
                    gr_id=gr.id,
                    position=pos,
                    item_id=ln["item_id"],
                    qty=ln["qty"],
                    remark=ln["remark"],
                )
            )
            inv_dao.add_movement(
                ItemKind.RM,
                ln["item_id"],
                Direction.IN,
                ln["qty"],
                moved_on=doc_date,
                remark=f"GRN: {bill_no}",
                ref_type=MovementRef.GRN,
                ref_id=gr.id,
                actor=actor,
            )
    except Exception:
        db.session.rollback()
        raise
    inv_dao.commit_issue(
        [(ItemKind.RM, ln["item_id"]) for ln in norm_lines], MovementRef.GRN, gr_id
    )

    logger.info("GRN %s (%s) issued with %d line(s)", bill_no, gr_id, len(norm_lines))
    gr = get_grn(gr_id)
    audit_dao.log_action("GRN_ADD", gr.id, gr.to_dict(), actor=actor)
    return gr


# ---------- helpers ----------
def normalize_lines(lines: List[Dict], kind: ItemKind) -> List[Dict]:
    """
    - Chuẩn hóa item_id / qty / remark
    - item phải tồn tại và đúng loại, qty > 0
    Dùng chung cho GRN (RM) và DN (FG).
    """
    if not lines:
        raise ValueError("Vui lòng nhập ít nhất 1 dòng.")

    normalized: List[Dict] = []
    for idx, ln in enumerate(lines, 1):
        raw_id = ln.get("item_id")
        if raw_id in (None, ""):
            raise ValueError(f"Dòng {idx}: chưa chọn mặt hàng.")
        try:
            item = item_dao.get_item_of_kind(raw_id, kind)
            qty = inv_dao.parse_qty(ln.get("qty"))
        except ValueError as e:
            raise ValueError(f"Dòng {idx}: {e}")
        normalized.append(
            {"item_id": item.id, "qty": qty, "remark": (ln.get("remark") or "").strip()}
        )
    return normalized


def _get_supplier(supplier_id) -> Supplier:
    try:
        sup = db.session.get(Supplier, int(supplier_id))
    except (TypeError, ValueError):
        sup = None
    if not sup or not sup.is_active:
        raise ValueError("Vui lòng chọn nhà cung cấp.")
    return sup
