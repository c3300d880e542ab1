# dao/stock.py
"""Nhập / xuất kho lẻ (không kèm chứng từ) cho RM và FG."""
import logging
from configs import db
from db.models.inventory import StockMovement, Direction, MovementRef
from dao import audit as audit_dao, inventory as inv_dao, item as item_dao
from utils.dates import today

logger = logging.getLogger(__name__)


def stock_in(kind, item_id, qty, remark: str = "", actor: str | None = None) -> StockMovement:
    return _manual_move(kind, item_id, qty, remark, Direction.IN, actor)


def stock_out(kind, item_id, qty, remark: str = "", actor: str | None = None) -> StockMovement:
    return _manual_move(kind, item_id, qty, remark, Direction.OUT, actor)


def _manual_move(kind, item_id, qty, remark, direction: Direction, actor) -> StockMovement:
    kind = item_dao.to_kind(kind)
    item = item_dao.get_item_of_kind(item_id, kind)
    qty = inv_dao.parse_qty(qty)
    actor = actor or audit_dao.current_actor()

    if direction == Direction.OUT:
        try:
            inv_dao.check_available(item.id, kind, qty)
        except inv_dao.InsufficientStock:
            logger.info("Stock out rejected for %s:%s qty=%s", kind.value, item.code, qty)
            raise

    try:
        mv = inv_dao.add_movement(
            kind,
            item.id,
            direction,
            qty,
            moved_on=today(),
            remark=remark or "",
            ref_type=MovementRef.MANUAL,
            actor=actor,
        )
    except Exception:
        db.session.rollback()
        raise
    inv_dao.commit_issue([(kind, item.id)], MovementRef.MANUAL, mv.id)

    logger.info("Stock %s %s:%s qty=%s", direction.value, kind.value, item.code, qty)
    audit_dao.log_action(
        f"{kind.value}_STOCK_{direction.value}",
        item.id,
        {"qty": qty, "remark": remark or "", "movement_id": mv.id},
        actor=actor,
    )
    return mv
