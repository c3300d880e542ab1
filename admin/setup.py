# admin/setup.py
from flask import abort, redirect, url_for
from flask_login import current_user, logout_user
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from flask_admin.theme import Bootstrap4Theme
from wtforms.validators import ValidationError
from configs import db
from dao import audit as audit_dao
from db.models.user import UserRole


def _is_admin():
    return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)


def _deny():
    # Chưa đăng nhập -> 401, sai role -> 403
    abort(401 if not current_user.is_authenticated else 403)


class MyAdminIndex(AdminIndexView):
    @expose("/logout")
    def admin_logout(self):
        if current_user.is_authenticated:
            logout_user()
        return redirect(url_for("admin.index"))

    def is_accessible(self):
        return _is_admin()

    def inaccessible_callback(self, name, **kwargs):
        _deny()


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return _is_admin()

    def inaccessible_callback(self, name, **kwargs):
        _deny()


class ReadOnlyView(SecureModelView):
    """Sổ kho và audit log chỉ được xem."""

    can_create = False
    can_edit = False
    can_delete = False


class ItemView(SecureModelView):
    # tạo mới qua /items/add (audit + stock_balance); loại RM/FG không đổi được
    can_create = False
    can_delete = False
    column_searchable_list = ["code", "name"]
    column_filters = ["kind", "group_tag", "is_active"]
    column_list = ["id", "kind", "code", "name", "group_tag", "threshold", "is_active"]
    form_excluded_columns = ["kind", "created_at", "created_by", "balance_row"]

    def on_model_change(self, form, model, is_created):
        if is_created:
            raise ValidationError("Tạo mặt hàng qua /items/add.")

    def after_model_change(self, form, model, is_created):
        audit_dao.log_action(
            f"{model.kind.value}_EDIT", model.id, model.to_dict(), actor=audit_dao.current_actor()
        )


class MovementView(ReadOnlyView):
    column_default_sort = ("created_at", True)
    column_filters = ["item_kind", "item_id", "direction", "ref_type", "moved_on"]
    column_list = [
        "id",
        "moved_on",
        "item_kind",
        "item",
        "direction",
        "qty",
        "ref_type",
        "ref_id",
        "created_by",
    ]


class AuditLogView(ReadOnlyView):
    column_default_sort = ("at", True)
    column_filters = ["action", "actor", "entity_id"]
    column_list = ["at", "actor", "action", "entity_id"]


def init_admin(app):

    admin = Admin(
        app,
        name="Stock Admin",
        theme=Bootstrap4Theme(),
        index_view=MyAdminIndex(url="/manage"),  # index sẽ là /manage/
        url="/manage",
    )
    # Import model ở đây để tránh circular import
    from db.models.user import User
    from db.models.item import Item
    from db.models.supplier import Supplier
    from db.models.inventory import StockBalance, StockMovement
    from db.models.goods_receipt import GoodsReceipt
    from db.models.delivery_note import DeliveryNote
    from db.models.production import Production
    from db.models.audit_log import AuditLog

    admin.add_view(
        SecureModelView(
            User, db, category="System", endpoint="admin_user", name="Users"
        )
    )
    admin.add_view(
        AuditLogView(
            AuditLog, db, category="System", endpoint="admin_audit", name="Audit Trail"
        )
    )
    admin.add_view(
        ItemView(
            Item, db, category="Master Data", endpoint="admin_item", name="Items"
        )
    )
    admin.add_view(
        SecureModelView(
            Supplier,
            db,
            category="Master Data",
            endpoint="admin_supplier",
            name="Suppliers",
        )
    )
    admin.add_view(
        ReadOnlyView(
            GoodsReceipt, db, category="Documents", endpoint="admin_grn", name="GRN"
        )
    )
    admin.add_view(
        ReadOnlyView(
            DeliveryNote,
            db,
            category="Documents",
            endpoint="admin_dn",
            name="Delivery Notes",
        )
    )
    admin.add_view(
        ReadOnlyView(
            Production,
            db,
            category="Documents",
            endpoint="admin_production",
            name="Productions",
        )
    )
    admin.add_view(
        ReadOnlyView(
            StockBalance,
            db,
            category="Inventory",
            endpoint="admin_stock_balance",
            name="Stock Balances",
        )
    )
    admin.add_view(
        MovementView(
            StockMovement,
            db,
            category="Inventory",
            endpoint="admin_stock_movement",
            name="Stock Movements",
        )
    )
    admin.add_link(
        MenuLink(
            name="Logout",
            category="System",
            endpoint="admin.admin_logout",
        )
    )

    return admin
