import logging
from typing import List, Optional
from werkzeug.security import check_password_hash, generate_password_hash
from configs import db
from db.models.user import User, UserRole
from dao import audit as audit_dao
from dao.base import commit

logger = logging.getLogger(__name__)

BOOTSTRAP_USERNAME = "admin"
BOOTSTRAP_PASSWORD = "admin"


def to_role(value) -> UserRole:
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole((value or "").strip().upper())
    except ValueError:
        raise ValueError(f"Role không hợp lệ: {value!r}")


def list_users() -> List[User]:
    return User.query.order_by(User.username.asc()).all()


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, int(user_id))


def authenticate(username: str, password: str) -> Optional[User]:
    """
    Trả user nếu đúng tài khoản/mật khẩu. Lần chạy đầu (chưa có user nào),
    admin/admin sẽ tạo tài khoản ADMIN đầu tiên.
    """
    username = (username or "").strip()
    if (
        username == BOOTSTRAP_USERNAME
        and password == BOOTSTRAP_PASSWORD
        and User.query.count() == 0
    ):
        logger.warning("No users found, creating initial admin account")
        return create_user(
            BOOTSTRAP_USERNAME,
            BOOTSTRAP_PASSWORD,
            UserRole.ADMIN,
            full_name="System Admin",
            actor="system",
        )

    user = User.query.filter_by(username=username).first()
    if not user or not check_password_hash(user.password_hash, password or ""):
        return None
    return user


def create_user(
    username: str,
    password: str,
    role=UserRole.OPERATOR,
    full_name: str | None = None,
    actor: str | None = None,
) -> User:
    username = (username or "").strip()
    if not username or not password:
        raise ValueError("Username và mật khẩu là bắt buộc.")
    if User.query.filter_by(username=username).first():
        raise ValueError(f"Username {username} đã tồn tại.")
    role = to_role(role)
    u = User(
        username=username,
        password_hash=generate_password_hash(password),
        full_name=full_name,
        role=role,
        is_active=True,
    )
    db.session.add(u)
    commit()
    audit_dao.log_action(
        "USER_ADD", u.id, {"username": username, "role": role.value}, actor=actor
    )
    return u


def update_user(user_id: int, actor: str | None = None, **fields) -> User:
    u = get_user(user_id)
    if not u:
        raise LookupError(f"Không tìm thấy user #{user_id}.")
    if fields.get("username"):
        username = fields["username"].strip()
        other = User.query.filter_by(username=username).first()
        if other and other.id != u.id:
            raise ValueError(f"Username {username} đã tồn tại.")
        u.username = username
    if fields.get("password"):
        u.password_hash = generate_password_hash(fields["password"])
    if fields.get("role"):
        u.role = to_role(fields["role"])
    if fields.get("full_name") is not None:
        u.full_name = fields["full_name"]
    if fields.get("is_active") is not None:
        u.is_active = bool(fields["is_active"])
    commit()
    # không log mật khẩu
    audit_dao.log_action(
        "USER_EDIT", u.id, {"username": u.username, "role": u.role.value}, actor=actor
    )
    return u


def delete_user(user_id: int, actor: str | None = None) -> bool:
    u = get_user(user_id)
    if not u:
        return False
    username = u.username
    db.session.delete(u)
    commit()
    audit_dao.log_action("USER_DELETE", user_id, {"username": username}, actor=actor)
    return True
