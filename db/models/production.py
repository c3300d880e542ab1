from configs import db
from datetime import datetime


class Production(db.Model):
    __tablename__ = "production"
    id = db.Column(db.String(40), primary_key=True)
    prod_no = db.Column(db.String(60))
    date = db.Column(db.Date, nullable=False, index=True)
    fg_id = db.Column(db.Integer, db.ForeignKey("item.id"), nullable=False)
    qty = db.Column(db.Numeric(18, 3), nullable=False)
    batch = db.Column(db.String(60))
    expiry = db.Column(db.Date)
    remark = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by = db.Column(db.String(80))
    fg = db.relationship("Item")

    def to_dict(self):
        return {
            "id": self.id,
            "prod_no": self.prod_no,
            "date": self.date.isoformat(),
            "fg_id": self.fg_id,
            "fg_name": self.fg.name if self.fg else None,
            "qty": float(self.qty),
            "batch": self.batch,
            "expiry": self.expiry.isoformat() if self.expiry else None,
            "remark": self.remark,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "created_by": self.created_by,
        }
