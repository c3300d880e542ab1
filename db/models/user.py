# db/models/user.py
import enum
from datetime import datetime
from configs import db
from flask_login import UserMixin


class UserRole(enum.Enum):
    ADMIN = "ADMIN"
    POWER = "POWER"  # Toàn quyền nghiệp vụ, trừ quản lý user
    MANAGER = "MANAGER"  # Quản lý kho
    STORE = "STORE"  # Thủ kho (GRN / DN)
    PRODUCTION = "PRODUCTION"  # Ghi nhận sản xuất
    VIEWER = "VIEWER"  # Chỉ xem
    OPERATOR = "OPERATOR"  # Nhập / xuất kho, sản xuất


class User(db.Model, UserMixin):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.OPERATOR, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        """Kiểm tra xem user có 1 trong các role truyền vào"""
        return self.role in roles

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "role": self.role.value,
            "is_active": self.is_active,
        }
