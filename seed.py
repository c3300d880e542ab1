# seed.py
from configs import db
from db.models.item import ItemKind
from db.models.supplier import Supplier
from dao import item as item_dao


# -------- Suppliers --------
def seed_suppliers():
    suppliers = [
        # name, contact, phone, email
        ("Gulf Chemicals Trading", "Ahmed Saleh", "+971 4 555 0101", "sales@gulfchem.example"),
        ("Prime Packaging LLC", "Maria Lopez", "+971 4 555 0144", "orders@primepack.example"),
        ("Oasis Labels", "Ravi Kumar", "+971 6 555 0199", "ravi@oasislabels.example"),
    ]
    for name, contact, phone, email in suppliers:
        s = Supplier.query.filter_by(name=name).first()
        if not s:
            db.session.add(
                Supplier(name=name, contact=contact, phone=phone, email=email, created_by="seed")
            )
        else:
            # cập nhật nhẹ nếu đã tồn tại
            s.contact, s.phone, s.email = contact, phone, email
    db.session.commit()
    print("✓ Suppliers seeded/updated")


# -------- Items --------
def seed_items():
    raw_materials = [
        # code, name, category, threshold, qty_per_fg, group
        ("RM-BASE-OIL", "Base oil SN150", "Chemical", 200, 0.9, "OIL"),
        ("RM-ADDITIVE-A", "Additive pack A", "Chemical", 20, 0.05, "OIL"),
        ("RM-BOTTLE-1L", "HDPE bottle 1L", "Packaging", 500, 1, "PACK"),
        ("RM-CAP-38MM", "Cap 38mm", "Packaging", 500, 1, "PACK"),
        ("RM-LABEL-1L", "Front label 1L", "Label", 1000, 1, "PACK"),
    ]
    finished_goods = [
        # code, name, volume, threshold, group
        ("FG-ENG-1L", "Engine oil 10W-40 1L", "1L", 100, "ENGINE"),
        ("FG-ENG-4L", "Engine oil 10W-40 4L", "4L", 40, "ENGINE"),
        ("FG-GEAR-1L", "Gear oil 80W-90 1L", "1L", 50, "GEAR"),
    ]

    existing = {(it.kind, it.code) for it in item_dao.list_items(active_only=False)}

    for code, name, category, threshold, qty_per_fg, group in raw_materials:
        if (ItemKind.RM, code) in existing:
            continue
        item_dao.create_item(
            ItemKind.RM,
            actor="seed",
            code=code,
            name=name,
            category=category,
            threshold=threshold,
            qty_per_fg=qty_per_fg,
            group_tag=group,
        )
    print("✓ Raw materials seeded")

    for code, name, volume, threshold, group in finished_goods:
        if (ItemKind.FG, code) in existing:
            continue
        item_dao.create_item(
            ItemKind.FG,
            actor="seed",
            code=code,
            name=name,
            volume=volume,
            threshold=threshold,
            group_tag=group,
        )
    print("✓ Finished goods seeded")


def seed_all():
    seed_suppliers()
    seed_items()
    print("✅ Seeded suppliers & items xong!")


if __name__ == "__main__":
    from app import create_app

    with create_app().app_context():
        seed_all()
