# dao/production.py
import logging
from typing import List, Optional
from configs import db
from db.models.inventory import Direction, MovementRef
from db.models.item import ItemKind
from db.models.production import Production
from dao import audit as audit_dao, inventory as inv_dao, item as item_dao
from utils.dates import parse_date, today
from utils.ids import gen_id

logger = logging.getLogger(__name__)


def list_productions() -> List[Production]:
    return Production.query.order_by(
        Production.created_at.desc(), Production.id.desc()
    ).all()


def get_production(prod_id: str) -> Optional[Production]:
    return db.session.get(Production, prod_id)


def create_production(
    fg_id,
    qty,
    batch: str | None = None,
    expiry=None,
    date=None,
    prod_no: str | None = None,
    remark: str | None = None,
    actor: str | None = None,
) -> Production:
    """
    Ghi nhận 1 mẻ sản xuất: nhập kho FG (1 movement IN).
    Không trừ NVL theo qty_per_fg.
    """
    fg = item_dao.get_item_of_kind(fg_id, ItemKind.FG)
    qty = inv_dao.parse_qty(qty)
    batch = (batch or "").strip()
    expiry = parse_date(expiry)
    doc_date = parse_date(date, default=today())
    actor = actor or audit_dao.current_actor()

    prod_id = gen_id("prod")
    try:
        prod = Production(
            id=prod_id,
            prod_no=(prod_no or "").strip() or None,
            date=doc_date,
            fg_id=fg.id,
            qty=qty,
            batch=batch or None,
            expiry=expiry,
            remark=remark or "",
            created_by=actor,
        )
        db.session.add(prod)
        db.session.flush()

        inv_dao.add_movement(
            ItemKind.FG,
            fg.id,
            Direction.IN,
            qty,
            moved_on=doc_date,
            remark=f"Production: {batch}",
            ref_type=MovementRef.PRODUCTION,
            ref_id=prod.id,
            actor=actor,
            batch=batch or None,
            expiry=expiry,
        )
    except Exception:
        db.session.rollback()
        raise
    inv_dao.commit_issue([(ItemKind.FG, fg.id)], MovementRef.PRODUCTION, prod_id)

    logger.info("Production %s: %s x %s", prod_id, fg.code, qty)
    prod = get_production(prod_id)
    audit_dao.log_action("PRODUCTION_ADD", prod.id, prod.to_dict(), actor=actor)
    return prod
