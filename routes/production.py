from flask import Blueprint, abort
from flask_login import login_required
from dao import production as prod_dao
from utils.auth import roles_required, PRODUCTION
from utils.http import ok, fail, payload

prod_bp = Blueprint("prod_web", __name__)


@prod_bp.route("/productions")
@login_required
def prod_list():
    return ok(productions=[p.to_dict() for p in prod_dao.list_productions()])


@prod_bp.route("/productions/<prod_id>")
@login_required
def prod_detail(prod_id: str):
    p = prod_dao.get_production(prod_id)
    if not p:
        abort(404)
    return ok(production=p.to_dict())


@prod_bp.route("/productions/add", methods=["POST"])
@roles_required(*PRODUCTION)
def prod_add():
    data = payload()
    try:
        p = prod_dao.create_production(
            fg_id=data.get("fg_id"),
            qty=data.get("qty"),
            batch=data.get("batch"),
            expiry=data.get("expiry"),
            date=data.get("date"),
            prod_no=data.get("prod_no"),
            remark=data.get("remark"),
        )
    except ValueError as e:
        return fail(str(e))
    return ok("Đã lưu mẻ sản xuất", 201, production=p.to_dict())
