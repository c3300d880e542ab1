from flask import Blueprint, request, abort
from flask_login import login_required
from dao import item as item_dao, inventory as inv_dao
from utils import stock
from utils.auth import roles_required, MASTER_DATA
from utils.http import ok, fail, payload

item_bp = Blueprint("item_web", __name__)


def _with_balance(it, bal):
    return {
        **it.to_dict(),
        "balance": float(bal),
        "level": stock.stock_level(bal, it.threshold),
    }


@item_bp.route("/items")
@login_required
def items_list():
    try:
        kind = item_dao.to_kind(request.args.get("kind", "RM"))
    except ValueError as e:
        return fail(str(e))
    balances = inv_dao.balance_map(kind)
    items = item_dao.list_items(kind)
    return ok(items=[_with_balance(it, balances.get(it.id, 0)) for it in items])


@item_bp.route("/items/<int:item_id>")
@login_required
def items_detail(item_id: int):
    it = item_dao.get_item(item_id)
    if not it:
        abort(404)
    return ok(item=_with_balance(it, inv_dao.compute_balance(it.id, it.kind)))


@item_bp.route("/items/add", methods=["POST"])
@roles_required(*MASTER_DATA)
def items_add():
    data = payload()
    kind = data.pop("kind", None)
    data.pop("actor", None)
    try:
        it = item_dao.create_item(kind, **data)
    except ValueError as e:
        return fail(str(e))
    return ok("Thêm mặt hàng thành công", 201, item=it.to_dict())


@item_bp.route("/items/edit/<int:item_id>", methods=["POST"])
@roles_required(*MASTER_DATA)
def items_edit(item_id: int):
    data = {k: v for k, v in payload().items() if k not in ("kind", "actor", "item_id")}
    try:
        it = item_dao.update_item(item_id, **data)
    except LookupError:
        abort(404)
    except ValueError as e:
        return fail(str(e))
    return ok("Cập nhật mặt hàng thành công", item=it.to_dict())
