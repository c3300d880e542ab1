# dao/audit.py
import json
import logging
from typing import List

from flask import current_app, has_request_context
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError

from configs import db
from db.models.audit_log import AuditLog
from utils.ids import gen_id

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 16384


def current_actor() -> str:
    if has_request_context() and current_user.is_authenticated:
        return current_user.username
    return "unknown"


def clone_details(details, max_bytes: int = DEFAULT_MAX_BYTES):
    """
    Sao chép `details` qua JSON (giá trị lạ -> str) để log không giữ tham chiếu
    tới object sống. Vượt `max_bytes` thì chỉ giữ bản xem trước.
    """
    raw = json.dumps(details, default=str, ensure_ascii=False, sort_keys=True)
    size = len(raw.encode("utf-8"))
    if size > max_bytes:
        preview = raw.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")
        return {"truncated": True, "size": size, "preview": preview}
    return json.loads(raw)


def log_action(action: str, entity_id, details=None, actor: str | None = None):
    """
    Ghi 1 dòng audit. Lỗi ghi log không làm hỏng nghiệp vụ đã commit:
    chỉ rollback phần log và ghi warning.
    """
    max_bytes = current_app.config.get("AUDIT_DETAILS_MAX_BYTES", DEFAULT_MAX_BYTES)
    try:
        entry = AuditLog(
            id=gen_id("log"),
            actor=actor or current_actor(),
            action=action,
            entity_id=str(entity_id) if entity_id is not None else None,
            details=clone_details(details if details is not None else {}, max_bytes),
        )
        db.session.add(entry)
        db.session.commit()
        return entry
    except (SQLAlchemyError, TypeError, ValueError):
        db.session.rollback()
        logger.warning("Audit log %s for %s not written", action, entity_id, exc_info=True)
        return None


def list_logs(limit: int | None = None) -> List[AuditLog]:
    q = AuditLog.query.order_by(AuditLog.at.desc(), AuditLog.id.desc())
    if limit:
        q = q.limit(limit)
    return q.all()
