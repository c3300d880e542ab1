from configs import db
from datetime import datetime
from sqlalchemy import event

from db.models.inventory import ImmutableRecordError


class AuditLog(db.Model):
    __tablename__ = "audit_log"
    id = db.Column(db.String(40), primary_key=True)
    at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    actor = db.Column(db.String(80), nullable=False, default="unknown")
    action = db.Column(db.String(40), nullable=False, index=True)  # RM_STOCK_IN, GRN_ADD...
    entity_id = db.Column(db.String(40))
    details = db.Column(db.JSON, default=dict)

    def to_dict(self):
        return {
            "id": self.id,
            "at": self.at.isoformat() if self.at else None,
            "actor": self.actor,
            "action": self.action,
            "entity_id": self.entity_id,
            "details": self.details,
        }


@event.listens_for(AuditLog, "before_update")
def _block_log_update(mapper, connection, target):
    raise ImmutableRecordError(f"AuditLog {target.id} không được sửa.")


@event.listens_for(AuditLog, "before_delete")
def _block_log_delete(mapper, connection, target):
    raise ImmutableRecordError(f"AuditLog {target.id} không được xóa.")
