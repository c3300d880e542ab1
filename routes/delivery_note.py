from flask import Blueprint, abort
from flask_login import login_required
from dao import delivery_note as dn_dao
from utils.auth import roles_required, DOC_ISSUE
from utils.http import ok, fail, payload, extract_lines

dn_bp = Blueprint("dn_web", __name__)


@dn_bp.route("/delivery-notes")
@login_required
def dn_list():
    return ok(delivery_notes=[dn.to_dict() for dn in dn_dao.list_dns()])


@dn_bp.route("/delivery-notes/<dn_id>")
@login_required
def dn_detail(dn_id: str):
    dn = dn_dao.get_dn(dn_id)
    if not dn:
        abort(404)
    return ok(delivery_note=dn.to_dict())


@dn_bp.route("/delivery-notes/add", methods=["POST"])
@roles_required(*DOC_ISSUE)
def dn_add():
    data = payload()
    try:
        dn = dn_dao.create_delivery_note(
            dn_no=data.get("dn_no"),
            date=data.get("date"),
            to_party=data.get("to"),
            lines=extract_lines(data),
            from_party=data.get("from"),
            production_plan=data.get("production_plan"),
            prod_ref=data.get("prod_ref"),
            general_remark=data.get("general_remark"),
        )
    except ValueError as e:
        return fail(str(e))
    return ok("Lưu phiếu giao hàng và xuất kho thành công", 201, delivery_note=dn.to_dict())
