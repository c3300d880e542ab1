from configs import db
from datetime import datetime
from sqlalchemy import event
import enum

from db.models.item import ItemKind


class Direction(enum.Enum):
    IN = "IN"
    OUT = "OUT"


class MovementRef(enum.Enum):
    MANUAL = "MANUAL"
    GRN = "GRN"
    DN = "DN"
    PRODUCTION = "PRODUCTION"


class ImmutableRecordError(Exception):
    pass


class StockBalance(db.Model):
    """Tồn hiện tại của 1 item, luôn cập nhật cùng transaction với movement."""

    __tablename__ = "stock_balance"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), unique=True, nullable=False)
    qty_on_hand = db.Column(db.Numeric(18, 3), default=0, nullable=False)
    item = db.relationship("Item", backref=db.backref("balance_row", uselist=False))


class StockMovement(db.Model):
    __tablename__ = "stock_movement"
    __table_args__ = (
        db.CheckConstraint("qty > 0", name="ck_stock_movement_qty_positive"),
        db.Index("ix_stock_movement_item", "item_kind", "item_id"),
    )

    id = db.Column(db.String(40), primary_key=True)
    item_kind = db.Column(db.Enum(ItemKind, name="itemkind"), nullable=False)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    direction = db.Column(db.Enum(Direction, name="direction"), nullable=False)
    qty = db.Column(db.Numeric(18, 3), nullable=False)  # luôn dương, dấu theo direction
    moved_on = db.Column(db.Date, nullable=False, index=True)
    remark = db.Column(db.Text)

    ref_type = db.Column(
        db.Enum(MovementRef, name="movementref"), default=MovementRef.MANUAL, nullable=False
    )
    ref_id = db.Column(db.String(40), index=True)  # id chứng từ gốc (GRN/DN/Production)

    batch = db.Column(db.String(60))
    expiry = db.Column(db.Date)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    created_by = db.Column(db.String(80))

    item = db.relationship("Item")

    @property
    def signed_qty(self):
        return self.qty if self.direction == Direction.IN else -self.qty

    def __repr__(self):
        return f"<StockMovement {self.id}: {self.direction.value} {self.qty} item #{self.item_id}>"

    def to_dict(self):
        return {
            "id": self.id,
            "item_kind": self.item_kind.value,
            "item_id": self.item_id,
            "direction": self.direction.value,
            "qty": float(self.qty),
            "date": self.moved_on.isoformat(),
            "remark": self.remark,
            "ref_type": self.ref_type.value,
            "ref_id": self.ref_id,
            "batch": self.batch,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
        }


# Movement là bất biến: chỉ thêm mới, sửa sai bằng movement bù trừ.
@event.listens_for(StockMovement, "before_update")
def _block_movement_update(mapper, connection, target):
    raise ImmutableRecordError(f"StockMovement {target.id} không được sửa.")


@event.listens_for(StockMovement, "before_delete")
def _block_movement_delete(mapper, connection, target):
    raise ImmutableRecordError(f"StockMovement {target.id} không được xóa.")
