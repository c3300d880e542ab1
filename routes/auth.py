from flask import Blueprint
from flask_login import login_user, logout_user, current_user, login_required
from dao import user as user_dao
from utils.http import ok, fail, payload

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.route("/login", methods=["POST"])
def login():
    data = payload()
    user = user_dao.authenticate(data.get("username", ""), data.get("password", ""))

    if not user:
        return fail("Sai tài khoản hoặc mật khẩu", 401)
    if not user.is_active:
        return fail("Tài khoản đã bị khóa", 403)

    login_user(user, remember=True)
    return ok(f"Xin chào, {user.username}!", user=user.to_dict())


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        logout_user()
    return ok("Đã đăng xuất")


@auth_bp.route("/me")
@login_required
def me():
    return ok(user=current_user.to_dict())
