from flask import Blueprint, request, abort
from flask_login import login_required, current_user
from db.models.item import ItemKind
from dao import stock as stock_dao, inventory as inv_dao, item as item_dao
from utils.auth import roles_required, RM_MOVE, FG_MOVE
from utils.http import ok, fail, payload

stock_bp = Blueprint("stock_web", __name__, url_prefix="/stock")


def _kind_or_404(kind: str) -> ItemKind:
    try:
        return item_dao.to_kind(kind)
    except ValueError:
        abort(404)


def _check_move_role(kind: ItemKind):
    if not current_user.has_role(*(RM_MOVE if kind == ItemKind.RM else FG_MOVE)):
        abort(403)


@stock_bp.route("/<kind>/in", methods=["POST"])
@roles_required(*set(RM_MOVE) | set(FG_MOVE))
def stock_in(kind: str):
    kind = _kind_or_404(kind)
    _check_move_role(kind)
    data = payload()
    try:
        mv = stock_dao.stock_in(kind, data.get("item_id"), data.get("qty"), data.get("remark", ""))
    except ValueError as e:
        return fail(str(e))
    return ok("Nhập kho thành công", 201, movement=mv.to_dict())


@stock_bp.route("/<kind>/out", methods=["POST"])
@roles_required(*set(RM_MOVE) | set(FG_MOVE))
def stock_out(kind: str):
    kind = _kind_or_404(kind)
    _check_move_role(kind)
    data = payload()
    try:
        mv = stock_dao.stock_out(kind, data.get("item_id"), data.get("qty"), data.get("remark", ""))
    except ValueError as e:
        return fail(str(e))
    return ok("Xuất kho thành công", 201, movement=mv.to_dict())


@stock_bp.route("/movements")
@login_required
def movements_list():
    kind = request.args.get("kind")
    item_id = request.args.get("item_id", type=int)
    limit = request.args.get("limit", type=int)
    mvs = inv_dao.list_movements(
        kind=_kind_or_404(kind) if kind else None, item_id=item_id, limit=limit
    )
    return ok(movements=[m.to_dict() for m in mvs])


@stock_bp.route("/<kind>/<int:item_id>/balance")
@login_required
def balance(kind: str, item_id: int):
    kind = _kind_or_404(kind)
    return ok(item_id=item_id, kind=kind.value, balance=float(inv_dao.compute_balance(item_id, kind)))
