from configs import db
from datetime import datetime


class GoodsReceipt(db.Model):
    """Phiếu nhập kho NVL từ nhà cung cấp (GRN / bill)."""

    __tablename__ = "goods_receipt"
    id = db.Column(db.String(40), primary_key=True)
    bill_no = db.Column(db.String(60), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    supplier_id = db.Column(db.Integer, db.ForeignKey("supplier.id"), nullable=False)
    supplier_name = db.Column(db.String(255))  # snapshot lúc nhập
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by = db.Column(db.String(80))
    supplier = db.relationship("Supplier")

    def to_dict(self):
        return {
            "id": self.id,
            "bill_no": self.bill_no,
            "date": self.date.isoformat(),
            "supplier_id": self.supplier_id,
            "supplier_name": self.supplier_name,
            "lines": [ln.to_dict() for ln in self.lines],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
        }


class GRLine(db.Model):
    __tablename__ = "gr_line"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    gr_id = db.Column(
        db.String(40),
        db.ForeignKey("goods_receipt.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = db.Column(db.Integer, nullable=False, default=0)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    qty = db.Column(db.Numeric(18, 3), nullable=False)
    remark = db.Column(db.Text)
    gr = db.relationship(
        "GoodsReceipt",
        backref=db.backref(
            "lines", cascade="all, delete-orphan", order_by="GRLine.position"
        ),
    )
    item = db.relationship("Item")

    def to_dict(self):
        return {"item_id": self.item_id, "qty": float(self.qty), "remark": self.remark}
