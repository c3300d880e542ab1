from configs import db
from datetime import datetime
import enum


class ItemKind(enum.Enum):
    RM = "RM"  # Nguyên liệu thô
    FG = "FG"  # Thành phẩm


class Item(db.Model):
    __tablename__ = "item"
    __table_args__ = (db.UniqueConstraint("kind", "code", name="uq_item_kind_code"),)

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    kind = db.Column(db.Enum(ItemKind, name="itemkind"), nullable=False, index=True)
    code = db.Column(db.String(60), nullable=False)
    name = db.Column(db.String(255), nullable=False)

    category = db.Column(db.String(100))  # RM
    volume = db.Column(db.String(60))  # FG
    barcode = db.Column(db.String(80))
    group_tag = db.Column(db.String(60))

    threshold = db.Column(db.Numeric(18, 3), default=0, nullable=False)
    qty_per_fg = db.Column(db.Numeric(18, 3))  # RM: định mức / 1 FG (chỉ tham khảo)
    exclusive = db.Column(db.Boolean, default=False)

    batch = db.Column(db.String(60))  # FG
    expiry = db.Column(db.Date)  # FG

    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by = db.Column(db.String(80))

    def __repr__(self):
        return f"<Item {self.kind.value}:{self.code}>"

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind.value,
            "code": self.code,
            "name": self.name,
            "category": self.category,
            "volume": self.volume,
            "barcode": self.barcode,
            "group": self.group_tag,
            "threshold": float(self.threshold or 0),
            "qty_per_fg": float(self.qty_per_fg) if self.qty_per_fg is not None else None,
            "exclusive": bool(self.exclusive),
            "batch": self.batch,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "is_active": bool(self.is_active),
        }
