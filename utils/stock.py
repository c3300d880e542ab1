# utils/stock.py
"""
Các phép tính thuần trên sổ movement: tồn kho, cảnh báo tồn thấp, chuỗi
nhập/xuất theo ngày.

Không đụng DB; `movements` là bất kỳ iterable nào có các thuộc tính
`item_kind`, `item_id`, `direction`, `qty`, `moved_on` (StockMovement hoặc
object tương đương). Enum hoặc chuỗi ('RM', 'IN'...) đều được chấp nhận.
"""
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable

LEVEL_OUT = "out"  # <= 0: đỏ
LEVEL_LOW = "low"  # <= threshold: vàng
LEVEL_OK = "ok"

# số lượng lưu Numeric(18, 3)
QTY_STEP = Decimal("0.001")


def dec(x) -> Decimal:
    return Decimal(str(x or 0))


def _val(x):
    return getattr(x, "value", x)


def signed_qty(mv) -> Decimal:
    q = dec(mv.qty)
    return q if _val(mv.direction) == "IN" else -q


def compute_balance(movements: Iterable, item_id: int, kind) -> Decimal:
    """
    Tồn của 1 item = tổng (+qty nếu IN, -qty nếu OUT) trên toàn bộ movement
    khớp (kind, item_id). Không có movement -> 0. Có thể âm, không chặn.
    """
    kind = _val(kind)
    total = Decimal(0)
    for mv in movements:
        if mv.item_id == item_id and _val(mv.item_kind) == kind:
            total += signed_qty(mv)
    return total


def balances_by_item(movements: Iterable, kind) -> dict[int, Decimal]:
    """Gom 1 lượt toàn bộ movement của 1 loại -> {item_id: tồn}."""
    kind = _val(kind)
    totals: dict[int, Decimal] = defaultdict(Decimal)
    for mv in movements:
        if _val(mv.item_kind) == kind:
            totals[mv.item_id] += signed_qty(mv)
    return dict(totals)


def is_low_stock(balance, threshold) -> bool:
    # bằng threshold cũng tính là thấp
    return dec(balance) <= dec(threshold)


def stock_level(balance, threshold) -> str:
    bal = dec(balance)
    if bal <= 0:
        return LEVEL_OUT
    if bal <= dec(threshold):
        return LEVEL_LOW
    return LEVEL_OK


def daily_series(movements: Iterable, today: date, days: int = 14) -> list[dict]:
    """
    Chuỗi `days` ngày liên tiếp kết thúc ở `today` (cũ -> mới), mỗi ngày
    {date, label, in, out}. RM và FG cộng chung. Ngày trống = 0/0.
    """
    window = [today - timedelta(days=days - 1 - i) for i in range(days)]
    ins = {d: Decimal(0) for d in window}
    outs = {d: Decimal(0) for d in window}

    for mv in movements:
        d = mv.moved_on
        if d not in ins:
            continue
        if _val(mv.direction) == "IN":
            ins[d] += dec(mv.qty)
        else:
            outs[d] += dec(mv.qty)

    return [
        {
            "date": d.isoformat(),
            "label": d.strftime("%b %d"),
            "in": ins[d],
            "out": outs[d],
        }
        for d in window
    ]
