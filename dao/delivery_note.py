# dao/delivery_note.py
import logging
from collections import defaultdict
from decimal import Decimal
from typing import List, Dict, Optional
from flask import current_app
from configs import db
from db.models.delivery_note import DeliveryNote, DNLine
from db.models.inventory import Direction, MovementRef
from db.models.item import ItemKind
from dao import audit as audit_dao, inventory as inv_dao
from dao.goods_receipt import normalize_lines
from utils.dates import parse_date, today
from utils.ids import gen_id

logger = logging.getLogger(__name__)


def list_dns() -> List[DeliveryNote]:
    return DeliveryNote.query.order_by(
        DeliveryNote.created_at.desc(), DeliveryNote.id.desc()
    ).all()


def get_dn(dn_id: str) -> Optional[DeliveryNote]:
    return db.session.get(DeliveryNote, dn_id)


def create_delivery_note(
    dn_no: str | None,
    date,
    to_party: str | None,
    lines: List[Dict],
    from_party: str | None = None,
    production_plan: str | None = None,
    prod_ref: str | None = None,
    general_remark: str | None = None,
    actor: str | None = None,
) -> DeliveryNote:
    """
    Xuất kho FG theo phiếu giao hàng: mỗi dòng -> 1 movement OUT.
    Kiểm tra tồn (gộp theo item) trước khi ghi; thiếu thì không ghi gì.
    """
    norm_lines = normalize_lines(lines, ItemKind.FG)
    doc_date = parse_date(date, default=today())
    actor = actor or audit_dao.current_actor()

    requested: Dict[int, Decimal] = defaultdict(Decimal)
    for ln in norm_lines:
        requested[ln["item_id"]] += ln["qty"]
    for item_id, qty in requested.items():
        try:
            inv_dao.check_available(item_id, ItemKind.FG, qty)
        except inv_dao.InsufficientStock as e:
            logger.info("DN rejected: %s", e)
            raise

    dn_id = gen_id("dn")
    dn_no = (dn_no or "").strip() or f"DN-{dn_id[-6:].upper()}"

    try:
        dn = DeliveryNote(
            id=dn_id,
            dn_no=dn_no,
            date=doc_date,
            from_party=(from_party or "").strip() or current_app.config["DN_DEFAULT_FROM"],
            to_party=(to_party or "").strip(),
            production_plan=production_plan or "",
            prod_ref=prod_ref or "",
            general_remark=general_remark or "",
            created_by=actor,
        )
        db.session.add(dn)
        db.session.flush()

        for pos, ln in enumerate(norm_lines):
            db.session.add(
                DNLine(
                    dn_id=dn.id,
                    position=pos,
                    item_id=ln["item_id"],
                    qty=ln["qty"],
                    remark=ln["remark"],
                )
            )
            inv_dao.add_movement(
                ItemKind.FG,
                ln["item_id"],
                Direction.OUT,
                ln["qty"],
                moved_on=doc_date,
                remark=f"DN: {dn_no}",
                ref_type=MovementRef.DN,
                ref_id=dn.id,
                actor=actor,
            )
    except Exception:
        db.session.rollback()
        raise
    inv_dao.commit_issue(
        [(ItemKind.FG, item_id) for item_id in requested], MovementRef.DN, dn_id
    )

    logger.info("DN %s (%s) issued with %d line(s)", dn_no, dn_id, len(norm_lines))
    dn = get_dn(dn_id)
    audit_dao.log_action("DN_ADD", dn.id, dn.to_dict(), actor=actor)
    return dn
