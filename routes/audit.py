from flask import Blueprint, request
from dao import audit as audit_dao
from utils.auth import roles_required, AUDIT_VIEW
from utils.http import ok

audit_bp = Blueprint("audit_web", __name__)


@audit_bp.route("/audit-logs")
@roles_required(*AUDIT_VIEW)
def audit_list():
    limit = request.args.get("limit", type=int)
    return ok(logs=[log.to_dict() for log in audit_dao.list_logs(limit=limit)])
