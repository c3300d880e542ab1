# dao/dashboard.py
from datetime import date, timedelta
from flask import current_app
from configs import db
from db.models.delivery_note import DeliveryNote
from db.models.goods_receipt import GoodsReceipt
from db.models.item import ItemKind
from db.models.production import Production
from dao import audit as audit_dao, inventory as inv_dao, item as item_dao
from utils import stock
from utils.dates import today as _today


def build_dashboard(today: date | None = None) -> dict:
    """
    Số liệu dashboard, tính lại mỗi lần gọi (không cache) nên cửa sổ ngày
    luôn trượt theo `today`.
    """
    today = today or _today()
    cfg = current_app.config
    days = cfg.get("DASHBOARD_DAYS", 14)
    limit = cfg.get("LOW_STOCK_ALERT_LIMIT", 6)

    rm_items = item_dao.list_items(ItemKind.RM)
    fg_items = item_dao.list_items(ItemKind.FG)

    low = []
    for kind, items in ((ItemKind.RM, rm_items), (ItemKind.FG, fg_items)):
        balances = inv_dao.balance_map(kind)
        for it in items:
            bal = balances.get(it.id, 0)
            if stock.is_low_stock(bal, it.threshold):
                low.append(
                    {
                        "id": it.id,
                        "kind": kind.value,
                        "code": it.code,
                        "name": it.name,
                        "balance": float(bal),
                        "threshold": float(it.threshold or 0),
                        "level": stock.stock_level(bal, it.threshold),
                    }
                )

    docs_today = sum(
        db.session.query(model).filter(model.date == today).count()
        for model in (GoodsReceipt, DeliveryNote, Production)
    )

    start = today - timedelta(days=days - 1)
    series = [
        {**row, "in": float(row["in"]), "out": float(row["out"])}
        for row in stock.daily_series(inv_dao.movements_since(start), today, days)
    ]

    return {
        "rm_count": len(rm_items),
        "fg_count": len(fg_items),
        "low_stock_count": len(low),
        "low_stock": low[:limit],
        "docs_today": docs_today,
        "series": series,
        "recent_activity": [log.to_dict() for log in audit_dao.list_logs(limit=10)],
    }
