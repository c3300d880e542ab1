from configs import db
from datetime import datetime


class DeliveryNote(db.Model):
    __tablename__ = "delivery_note"
    id = db.Column(db.String(40), primary_key=True)
    dn_no = db.Column(db.String(60), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    from_party = db.Column(db.String(255))
    to_party = db.Column(db.String(255), nullable=False)
    production_plan = db.Column(db.String(255))
    prod_ref = db.Column(db.String(255))
    general_remark = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by = db.Column(db.String(80))

    def to_dict(self):
        return {
            "id": self.id,
            "dn_no": self.dn_no,
            "date": self.date.isoformat(),
            "from": self.from_party,
            "to": self.to_party,
            "production_plan": self.production_plan,
            "prod_ref": self.prod_ref,
            "general_remark": self.general_remark,
            "lines": [ln.to_dict() for ln in self.lines],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
        }


class DNLine(db.Model):
    __tablename__ = "dn_line"
    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    dn_id = db.Column(
        db.String(40),
        db.ForeignKey("delivery_note.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = db.Column(db.Integer, nullable=False, default=0)
    item_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    qty = db.Column(db.Numeric(18, 3), nullable=False)
    remark = db.Column(db.Text)
    dn = db.relationship(
        "DeliveryNote",
        backref=db.backref(
            "lines", cascade="all, delete-orphan", order_by="DNLine.position"
        ),
    )
    item = db.relationship("Item")

    def to_dict(self):
        return {"item_id": self.item_id, "qty": float(self.qty), "remark": self.remark}
