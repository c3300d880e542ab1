# utils/auth.py
from functools import wraps
from flask import abort
from flask_login import current_user
from db.models.user import UserRole as R

# Nhóm quyền theo nghiệp vụ
ALL_ROLES = tuple(R)
MASTER_DATA = (R.ADMIN, R.POWER, R.MANAGER)
RM_MOVE = (R.ADMIN, R.POWER, R.MANAGER, R.STORE, R.OPERATOR)
FG_MOVE = (R.ADMIN, R.POWER, R.MANAGER, R.OPERATOR)
DOC_ISSUE = (R.ADMIN, R.POWER, R.MANAGER, R.STORE)  # GRN / DN
PRODUCTION = (R.ADMIN, R.POWER, R.MANAGER, R.PRODUCTION, R.OPERATOR)
SUPPLIER_VIEW = (R.ADMIN, R.POWER, R.MANAGER, R.STORE, R.VIEWER)
SUPPLIER_DELETE = (R.ADMIN, R.POWER)
AUDIT_VIEW = (R.ADMIN, R.POWER, R.MANAGER, R.STORE, R.PRODUCTION, R.VIEWER)
USER_ADMIN = (R.ADMIN,)


def roles_required(*roles):
    def deco(fn):
        @wraps(fn)
        def inner(*a, **kw):
            if not current_user.is_authenticated:
                abort(401)
            if not current_user.has_role(*roles):
                abort(403)
            return fn(*a, **kw)

        return inner

    return deco
