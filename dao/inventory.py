# dao/inventory.py
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional
from flask import current_app
from sqlalchemy import func, update
from configs import db
from dao.base import commit
from signals import ledger_changed
from db.models.item import Item, ItemKind
from db.models.inventory import StockBalance, StockMovement, Direction, MovementRef
from utils import stock
from utils.ids import gen_id

logger = logging.getLogger(__name__)


class InsufficientStock(ValueError):
    def __init__(self, item_id: int, requested, available):
        self.item_id = item_id
        self.requested = stock.dec(requested).quantize(stock.QTY_STEP)
        self.available = stock.dec(available).quantize(stock.QTY_STEP)
        super().__init__(
            f"Không đủ tồn cho mặt hàng #{item_id}: cần {self.requested}, còn {self.available}."
        )


def parse_qty(value, label: str = "Số lượng") -> Decimal:
    """Số lượng > 0, tối đa 3 chữ số thập phân (khớp cột Numeric(18, 3))."""
    try:
        q = Decimal(str(value).strip())
        if not q.is_finite() or q <= 0:
            raise ValueError(f"{label} phải > 0.")
        rounded = q.quantize(stock.QTY_STEP)
    except (InvalidOperation, TypeError):
        raise ValueError(f"{label} phải là số.")
    if rounded != q:
        raise ValueError(f"{label} tối đa 3 chữ số thập phân.")
    return rounded


def _ledger_rows(kind: ItemKind, item_ids: Iterable[int] | None = None):
    q = db.session.query(
        StockMovement.item_kind,
        StockMovement.item_id,
        StockMovement.direction,
        StockMovement.qty,
    ).filter(StockMovement.item_kind == kind)
    if item_ids is not None:
        q = q.filter(StockMovement.item_id.in_(list(item_ids)))
    return q.all()


# ---------- đọc tồn ----------
def compute_balance(item_id: int, kind: ItemKind) -> Decimal:
    """Tồn tính lại từ TOÀN BỘ lịch sử movement của item (không dùng cache)."""
    return stock.compute_balance(_ledger_rows(kind, [item_id]), item_id, kind)


def balance_map(kind: ItemKind) -> dict[int, Decimal]:
    """{item_id: tồn} cho mọi item của 1 loại, 1 lượt quét sổ."""
    return stock.balances_by_item(_ledger_rows(kind), kind)


def check_available(item_id: int, kind: ItemKind, requested) -> Decimal:
    """
    Kiểm tra sơ bộ trước khi ghi (tính từ sổ). Việc chặn thật sự nằm ở
    reserve_stock trong cùng transaction ghi.
    """
    bal = compute_balance(item_id, kind)
    if bal < stock.dec(requested):
        raise InsufficientStock(item_id, requested, bal)
    return bal


def list_movements(
    kind: ItemKind | None = None,
    item_id: int | None = None,
    ref_id: str | None = None,
    limit: int | None = None,
) -> List[StockMovement]:
    q = StockMovement.query
    if kind is not None:
        q = q.filter(StockMovement.item_kind == kind)
    if item_id is not None:
        q = q.filter(StockMovement.item_id == int(item_id))
    if ref_id is not None:
        q = q.filter(StockMovement.ref_id == ref_id)
    q = q.order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
    if limit:
        q = q.limit(limit)
    return q.all()


def movements_since(start: date) -> List[StockMovement]:
    return StockMovement.query.filter(StockMovement.moved_on >= start).all()


# ---------- tồn duy trì (stock_balance) ----------
def ensure_balance_row(item_id: int) -> StockBalance:
    sb = StockBalance.query.filter_by(item_id=item_id).first()
    if not sb:
        sb = StockBalance(item_id=item_id, qty_on_hand=stock.dec(0))
        db.session.add(sb)
        db.session.flush()
    return sb


def _rounded(expr):
    # SQLite gắn Numeric dưới dạng float: làm tròn trong SQL theo 3 số lẻ
    return func.round(expr, 3)


def bump_stock(item_id: int, delta) -> None:
    """Cộng tồn ngay trong DB (qty_on_hand = qty_on_hand + delta)."""
    delta = stock.dec(delta)
    db.session.flush()
    res = db.session.execute(
        update(StockBalance)
        .where(StockBalance.item_id == item_id)
        .values(qty_on_hand=_rounded(StockBalance.qty_on_hand + delta))
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        db.session.add(StockBalance(item_id=item_id, qty_on_hand=delta))
        db.session.flush()


def reserve_stock(item_id: int, qty) -> None:
    """
    Trừ tồn có điều kiện: chỉ trừ khi qty_on_hand >= qty, trong 1 câu UPDATE.
    Không có dòng nào bị ảnh hưởng -> InsufficientStock (caller rollback).
    """
    qty = stock.dec(qty)
    remaining = _rounded(StockBalance.qty_on_hand - qty)
    db.session.flush()
    res = db.session.execute(
        update(StockBalance)
        .where(StockBalance.item_id == item_id, remaining >= 0)
        .values(qty_on_hand=remaining)
        .execution_options(synchronize_session=False)
    )
    if res.rowcount == 0:
        sb = StockBalance.query.filter_by(item_id=item_id).first()
        available = sb.qty_on_hand if sb else 0
        raise InsufficientStock(item_id, qty, available)


def add_movement(
    kind: ItemKind,
    item_id: int,
    direction: Direction,
    qty,
    moved_on: date,
    remark: str | None = None,
    ref_type: MovementRef = MovementRef.MANUAL,
    ref_id: str | None = None,
    actor: str | None = None,
    batch: str | None = None,
    expiry: date | None = None,
) -> StockMovement:
    """
    Ghi 1 movement và cập nhật tồn duy trì tương ứng. KHÔNG commit:
    caller gom cả chứng từ vào 1 transaction.
    """
    qty = stock.dec(qty)
    if qty <= 0:
        raise ValueError("Số lượng phải > 0.")

    if direction == Direction.OUT:
        reserve_stock(item_id, qty)
    else:
        bump_stock(item_id, qty)

    mv = StockMovement(
        id=gen_id("mv"),
        item_kind=kind,
        item_id=item_id,
        direction=direction,
        qty=qty,
        moved_on=moved_on,
        remark=remark,
        ref_type=ref_type,
        ref_id=ref_id,
        batch=batch,
        expiry=expiry,
        created_by=actor or "unknown",
    )
    db.session.add(mv)
    return mv


def sync_balances(item_ids: Optional[Iterable[int]] = None) -> dict[int, Decimal]:
    """
    Đồng bộ lại stock_balance theo tổng movement. Trả {item_id: tồn mới}
    cho các item bị lệch.
    """
    q = Item.query
    if item_ids is not None:
        ids = list(set(int(x) for x in item_ids if x is not None))
        if not ids:
            return {}
        q = q.filter(Item.id.in_(ids))
    items = q.all()

    totals = {k: balance_map(k) for k in ItemKind}
    changed = {}
    for it in items:
        total = totals[it.kind].get(it.id, Decimal(0)).quantize(stock.QTY_STEP)
        sb = StockBalance.query.filter_by(item_id=it.id).one_or_none()
        if sb is None:
            db.session.add(StockBalance(item_id=it.id, qty_on_hand=total))
            changed[it.id] = total
        elif stock.dec(sb.qty_on_hand).quantize(stock.QTY_STEP) != total:
            sb.qty_on_hand = total
            changed[it.id] = total
    commit()
    if changed:
        logger.warning("Resynced %d stock balance(s): %s", len(changed), sorted(changed))
    return changed


def commit_issue(items, ref_type: MovementRef, ref_id: str | None) -> None:
    """
    Commit toàn bộ chứng từ + movement + tồn như 1 transaction; lỗi thì
    rollback hết. Sau commit mới phát ledger_changed.
    """
    commit()
    ledger_changed.send(
        current_app._get_current_object(),
        items=list(items),
        ref_type=ref_type.value,
        ref_id=ref_id,
    )


# ---------- subscriber ----------
def warn_low_stock(sender, items=(), **kwargs):
    """Nhận ledger_changed: ghi warning cho item vừa chạm ngưỡng tồn thấp."""
    for kind, item_id in items:
        it = db.session.get(Item, item_id)
        if it is None:
            continue
        bal = compute_balance(item_id, kind)
        if stock.is_low_stock(bal, it.threshold):
            logger.warning(
                "Low stock %s:%s balance=%s threshold=%s",
                kind.value, it.code, bal, it.threshold,
            )
