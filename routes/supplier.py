from flask import Blueprint, abort
from dao import supplier as supplier_dao
from utils.auth import roles_required, SUPPLIER_VIEW, MASTER_DATA, SUPPLIER_DELETE
from utils.http import ok, fail, payload

supplier_bp = Blueprint("supplier_web", __name__)


@supplier_bp.route("/suppliers")
@roles_required(*SUPPLIER_VIEW)
def suppliers_list():
    return ok(suppliers=[s.to_dict() for s in supplier_dao.list_suppliers()])


@supplier_bp.route("/suppliers/add", methods=["POST"])
@roles_required(*MASTER_DATA)
def suppliers_add():
    data = payload()
    try:
        s = supplier_dao.create_supplier(
            name=data.get("name", ""),
            contact=data.get("contact"),
            phone=data.get("phone"),
            email=data.get("email"),
        )
    except ValueError as e:
        return fail(str(e))
    return ok("Thêm nhà cung cấp thành công", 201, supplier=s.to_dict())


@supplier_bp.route("/suppliers/edit/<int:supplier_id>", methods=["POST"])
@roles_required(*MASTER_DATA)
def suppliers_edit(supplier_id: int):
    data = payload()
    try:
        s = supplier_dao.update_supplier(
            supplier_id,
            name=data.get("name"),
            contact=data.get("contact"),
            phone=data.get("phone"),
            email=data.get("email"),
        )
    except LookupError:
        abort(404)
    except ValueError as e:
        return fail(str(e))
    return ok("Cập nhật nhà cung cấp thành công", supplier=s.to_dict())


@supplier_bp.route("/suppliers/delete/<int:supplier_id>", methods=["POST"])
@roles_required(*SUPPLIER_DELETE)
def suppliers_delete(supplier_id: int):
    if not supplier_dao.delete_supplier(supplier_id):
        abort(404)
    return ok("Xóa nhà cung cấp thành công")
