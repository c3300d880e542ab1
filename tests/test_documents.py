from datetime import date

import pytest

from dao import (
    delivery_note as dn_dao,
    goods_receipt as gr_dao,
    inventory as inv_dao,
    production as prod_dao,
    stock as stock_dao,
)
from db.models.audit_log import AuditLog
from db.models.delivery_note import DeliveryNote
from db.models.goods_receipt import GoodsReceipt
from db.models.inventory import Direction, MovementRef, StockMovement
from db.models.item import ItemKind
from db.models.production import Production


class TestGoodsReceipt:
    def test_two_lines_make_two_in_movements(self, ctx, make_item, make_supplier):
        sup = make_supplier()
        rm = make_item("RM", "RM-A")

        gr = gr_dao.create_grn(
            "BILL-1",
            "2026-10-18",
            sup.id,
            [{"item_id": rm.id, "qty": 4}, {"item_id": rm.id, "qty": "6", "remark": "pallet 2"}],
            actor="tester",
        )

        mvs = inv_dao.list_movements(ref_id=gr.id)
        assert len(mvs) == 2
        for mv in mvs:
            assert mv.item_kind == ItemKind.RM
            assert mv.item_id == rm.id
            assert mv.direction == Direction.IN
            assert mv.ref_type == MovementRef.GRN
            assert mv.remark == "GRN: BILL-1"
            assert mv.moved_on == date(2026, 10, 18)
        assert sorted(float(m.qty) for m in mvs) == [4.0, 6.0]
        assert inv_dao.compute_balance(rm.id, ItemKind.RM) == 10

        assert [ln.position for ln in gr.lines] == [0, 1]
        assert gr.supplier_name == sup.name
        log = AuditLog.query.filter_by(action="GRN_ADD").one()
        assert log.entity_id == gr.id
        assert len(log.details["lines"]) == 2

    def test_bill_no_defaults_from_id(self, ctx, make_item, make_supplier):
        sup = make_supplier()
        rm = make_item("RM", "RM-A")
        gr = gr_dao.create_grn("", None, sup.id, [{"item_id": rm.id, "qty": 1}], actor="tester")
        assert gr.bill_no == f"GRN-{gr.id[-6:].upper()}"

    def test_fg_line_rejected(self, ctx, make_item, make_supplier):
        sup = make_supplier()
        fg = make_item("FG", "FG-A")
        with pytest.raises(ValueError, match="Dòng 1"):
            gr_dao.create_grn("B", None, sup.id, [{"item_id": fg.id, "qty": 1}], actor="tester")
        assert GoodsReceipt.query.count() == 0

    def test_bad_line_rolls_back_whole_document(self, ctx, make_item, make_supplier):
        sup = make_supplier()
        rm = make_item("RM", "RM-A")
        with pytest.raises(ValueError, match="Dòng 2"):
            gr_dao.create_grn(
                "B",
                None,
                sup.id,
                [{"item_id": rm.id, "qty": 3}, {"item_id": rm.id, "qty": 0}],
                actor="tester",
            )
        assert GoodsReceipt.query.count() == 0
        assert StockMovement.query.count() == 0

    def test_supplier_required(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        with pytest.raises(ValueError):
            gr_dao.create_grn("B", None, None, [{"item_id": rm.id, "qty": 1}], actor="tester")

    def test_empty_lines(self, ctx, make_supplier):
        sup = make_supplier()
        with pytest.raises(ValueError):
            gr_dao.create_grn("B", None, sup.id, [], actor="tester")


class TestDeliveryNote:
    def test_insufficient_stock_writes_nothing(self, ctx, make_item):
        fg = make_item("FG", "FG-A")
        stock_dao.stock_in("FG", fg.id, 15, actor="tester")
        before = StockMovement.query.count()

        with pytest.raises(inv_dao.InsufficientStock) as exc:
            dn_dao.create_delivery_note("DN-1", None, "Customer", [{"item_id": fg.id, "qty": 20}], actor="tester")

        assert exc.value.available == 15
        assert StockMovement.query.count() == before
        assert DeliveryNote.query.count() == 0
        assert inv_dao.compute_balance(fg.id, ItemKind.FG) == 15

    def test_repeated_item_lines_are_summed(self, ctx, make_item):
        fg = make_item("FG", "FG-A")
        stock_dao.stock_in("FG", fg.id, 10, actor="tester")
        with pytest.raises(inv_dao.InsufficientStock):
            dn_dao.create_delivery_note(
                "DN-1",
                None,
                "Customer",
                [{"item_id": fg.id, "qty": 6}, {"item_id": fg.id, "qty": 6}],
                actor="tester",
            )
        assert DeliveryNote.query.count() == 0

    def test_issue_writes_out_movements(self, ctx, make_item):
        fg = make_item("FG", "FG-A")
        other = make_item("FG", "FG-B")
        stock_dao.stock_in("FG", fg.id, 10, actor="tester")
        stock_dao.stock_in("FG", other.id, 5, actor="tester")

        dn = dn_dao.create_delivery_note(
            "DN-7",
            "2026-10-17",
            "Customer",
            [{"item_id": fg.id, "qty": 4}, {"item_id": other.id, "qty": 5}],
            actor="tester",
        )

        mvs = inv_dao.list_movements(ref_id=dn.id)
        assert len(mvs) == 2
        assert all(m.direction == Direction.OUT and m.ref_type == MovementRef.DN for m in mvs)
        assert all(m.remark == "DN: DN-7" for m in mvs)
        assert inv_dao.compute_balance(fg.id, ItemKind.FG) == 6
        assert inv_dao.compute_balance(other.id, ItemKind.FG) == 0
        assert dn.from_party == ctx.config["DN_DEFAULT_FROM"]
        assert dn.to_dict()["to"] == "Customer"

    def test_rm_line_rejected(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        stock_dao.stock_in("RM", rm.id, 10, actor="tester")
        with pytest.raises(ValueError):
            dn_dao.create_delivery_note("DN-1", None, "X", [{"item_id": rm.id, "qty": 1}], actor="tester")


class TestProduction:
    def test_records_fg_in_only(self, ctx, make_item):
        rm = make_item("RM", "RM-A", qty_per_fg=2)
        fg = make_item("FG", "FG-A")
        stock_dao.stock_in("RM", rm.id, 10, actor="tester")

        prod = prod_dao.create_production(fg.id, 12, batch="B-01", expiry="2027-01-31", actor="tester")

        mvs = inv_dao.list_movements(ref_id=prod.id)
        assert len(mvs) == 1
        mv = mvs[0]
        assert mv.item_kind == ItemKind.FG
        assert mv.direction == Direction.IN
        assert mv.ref_type == MovementRef.PRODUCTION
        assert mv.remark == "Production: B-01"
        assert mv.batch == "B-01"
        assert mv.expiry == date(2027, 1, 31)
        # NVL không bị trừ
        assert inv_dao.compute_balance(rm.id, ItemKind.RM) == 10
        assert inv_dao.compute_balance(fg.id, ItemKind.FG) == 12
        assert Production.query.count() == 1
        assert AuditLog.query.filter_by(action="PRODUCTION_ADD", entity_id=prod.id).count() == 1

    def test_rm_item_rejected(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        with pytest.raises(ValueError):
            prod_dao.create_production(rm.id, 1, actor="tester")
        assert Production.query.count() == 0

    def test_bad_expiry(self, ctx, make_item):
        fg = make_item("FG", "FG-A")
        with pytest.raises(ValueError):
            prod_dao.create_production(fg.id, 1, expiry="31/31/2027", actor="tester")
