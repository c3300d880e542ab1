from flask import Blueprint, abort
from flask_login import login_required
from dao import goods_receipt as gr_dao
from utils.auth import roles_required, DOC_ISSUE
from utils.http import ok, fail, payload, extract_lines

gr_bp = Blueprint("gr_web", __name__)


@gr_bp.route("/goods-receipts")
@login_required
def gr_list():
    return ok(goods_receipts=[gr.to_dict() for gr in gr_dao.list_grns()])


@gr_bp.route("/goods-receipts/<gr_id>")
@login_required
def gr_detail(gr_id: str):
    gr = gr_dao.get_grn(gr_id)
    if not gr:
        abort(404)
    return ok(goods_receipt=gr.to_dict())


@gr_bp.route("/goods-receipts/add", methods=["POST"])
@roles_required(*DOC_ISSUE)
def gr_add():
    data = payload()
    try:
        gr = gr_dao.create_grn(
            bill_no=data.get("bill_no"),
            date=data.get("date"),
            supplier_id=data.get("supplier_id"),
            lines=extract_lines(data),
        )
    except ValueError as e:
        return fail(str(e))
    return ok("Lưu GRN và nhập kho thành công", 201, goods_receipt=gr.to_dict())
