from flask import Blueprint, abort
from flask_login import current_user
from dao import user as user_dao
from utils.auth import roles_required, USER_ADMIN
from utils.http import ok, fail, payload

user_bp = Blueprint("user_web", __name__)


@user_bp.route("/users")
@roles_required(*USER_ADMIN)
def users_list():
    return ok(users=[u.to_dict() for u in user_dao.list_users()])


@user_bp.route("/users/add", methods=["POST"])
@roles_required(*USER_ADMIN)
def users_add():
    data = payload()
    try:
        u = user_dao.create_user(
            data.get("username", ""),
            data.get("password", ""),
            data.get("role") or "OPERATOR",
            full_name=data.get("full_name"),
        )
    except ValueError as e:
        return fail(str(e))
    return ok("Thêm user thành công", 201, user=u.to_dict())


@user_bp.route("/users/edit/<int:user_id>", methods=["POST"])
@roles_required(*USER_ADMIN)
def users_edit(user_id: int):
    data = payload()
    try:
        u = user_dao.update_user(
            user_id,
            username=data.get("username"),
            password=data.get("password"),
            role=data.get("role"),
            full_name=data.get("full_name"),
        )
    except LookupError:
        abort(404)
    except ValueError as e:
        return fail(str(e))
    return ok("Cập nhật user thành công", user=u.to_dict())


@user_bp.route("/users/delete/<int:user_id>", methods=["POST"])
@roles_required(*USER_ADMIN)
def users_delete(user_id: int):
    if user_id == current_user.id:
        return fail("Không thể tự xóa tài khoản đang đăng nhập.")
    if not user_dao.delete_user(user_id):
        abort(404)
    return ok("Xóa user thành công")
