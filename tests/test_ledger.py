import logging
from decimal import Decimal

import pytest

from configs import db
from dao import inventory as inv_dao, stock as stock_dao
from db.models.audit_log import AuditLog
from db.models.inventory import (
    Direction,
    ImmutableRecordError,
    MovementRef,
    StockBalance,
    StockMovement,
)
from db.models.item import ItemKind


def _balance_row(item_id):
    return StockBalance.query.filter_by(item_id=item_id).one()


class TestManualMoves:
    def test_stock_in_then_out(self, ctx, make_item):
        rm = make_item("RM", "RM-A", threshold=5)
        stock_dao.stock_in("RM", rm.id, 10, actor="tester")
        mv = stock_dao.stock_out("RM", rm.id, 3, remark="line 2", actor="tester")

        assert mv.direction == Direction.OUT
        assert mv.ref_type == MovementRef.MANUAL
        assert mv.remark == "line 2"
        assert inv_dao.compute_balance(rm.id, ItemKind.RM) == 7
        assert Decimal(str(_balance_row(rm.id).qty_on_hand)) == 7

    def test_audit_entry_written(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        mv = stock_dao.stock_in("RM", rm.id, 4, remark="first", actor="tester")

        log = AuditLog.query.filter_by(action="RM_STOCK_IN").one()
        assert log.actor == "tester"
        assert log.entity_id == str(rm.id)
        assert log.details["movement_id"] == mv.id
        assert log.details["remark"] == "first"

    def test_out_beyond_balance_rejected_without_writes(self, ctx, make_item):
        fg = make_item("FG", "FG-A")
        stock_dao.stock_in("FG", fg.id, 5, actor="tester")

        with pytest.raises(inv_dao.InsufficientStock) as exc:
            stock_dao.stock_out("FG", fg.id, 6, actor="tester")

        assert exc.value.available == 5
        assert exc.value.requested == 6
        assert StockMovement.query.count() == 1
        assert AuditLog.query.filter_by(action="FG_STOCK_OUT").count() == 0

    @pytest.mark.parametrize("qty", [0, -1, "abc", "", None, "nan", "inf", "0.0001", "1.2345"])
    def test_bad_quantity(self, ctx, make_item, qty):
        rm = make_item("RM", "RM-A")
        with pytest.raises(ValueError):
            stock_dao.stock_in("RM", rm.id, qty, actor="tester")
        assert StockMovement.query.count() == 0

    def test_three_decimals_kept_exactly(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        mv = stock_dao.stock_in("RM", rm.id, "0.125", actor="tester")
        assert Decimal(str(mv.qty)) == Decimal("0.125")
        assert inv_dao.compute_balance(rm.id, ItemKind.RM) == Decimal("0.125")

    def test_fractional_moves_drain_to_zero(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        stock_dao.stock_in("RM", rm.id, "0.3", actor="tester")
        stock_dao.stock_out("RM", rm.id, "0.1", actor="tester")
        stock_dao.stock_out("RM", rm.id, "0.2", actor="tester")

        assert inv_dao.compute_balance(rm.id, ItemKind.RM) == 0
        assert Decimal(str(_balance_row(rm.id).qty_on_hand)) == 0
        with pytest.raises(inv_dao.InsufficientStock):
            stock_dao.stock_out("RM", rm.id, "0.001", actor="tester")
        assert StockMovement.query.count() == 3

    def test_wrong_kind_rejected(self, ctx, make_item):
        fg = make_item("FG", "FG-A")
        with pytest.raises(ValueError):
            stock_dao.stock_in("RM", fg.id, 1, actor="tester")

    def test_unknown_item_rejected(self, ctx):
        with pytest.raises(ValueError):
            stock_dao.stock_in("RM", 999, 1, actor="tester")

    def test_low_stock_warning_logged(self, ctx, make_item, caplog):
        rm = make_item("RM", "RM-LOW", threshold=5)
        stock_dao.stock_in("RM", rm.id, 10, actor="tester")
        caplog.clear()
        with caplog.at_level(logging.WARNING, logger="dao.inventory"):
            stock_dao.stock_out("RM", rm.id, 7, actor="tester")
        assert any("RM-LOW" in r.getMessage() for r in caplog.records)


class TestReserve:
    def test_conditional_decrement_blocks_stale_check(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        stock_dao.stock_in("RM", rm.id, 10, actor="tester")

        # tồn duy trì thấp hơn sổ: kiểm tra sơ bộ qua, câu UPDATE có điều kiện chặn
        sb = _balance_row(rm.id)
        sb.qty_on_hand = Decimal(2)
        db.session.commit()

        with pytest.raises(inv_dao.InsufficientStock):
            stock_dao.stock_out("RM", rm.id, 5, actor="tester")

        assert StockMovement.query.count() == 1
        assert Decimal(str(_balance_row(rm.id).qty_on_hand)) == 2

    def test_add_movement_out_without_stock(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        with pytest.raises(inv_dao.InsufficientStock):
            inv_dao.add_movement(
                ItemKind.RM, rm.id, Direction.OUT, 1, moved_on=None, actor="tester"
            )
        db.session.rollback()
        assert StockMovement.query.count() == 0


class TestImmutability:
    def test_movement_cannot_be_updated(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        mv = stock_dao.stock_in("RM", rm.id, 3, actor="tester")
        mv.remark = "edited"
        with pytest.raises(ImmutableRecordError):
            db.session.flush()
        db.session.rollback()

    def test_movement_cannot_be_deleted(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        mv = stock_dao.stock_in("RM", rm.id, 3, actor="tester")
        db.session.delete(mv)
        with pytest.raises(ImmutableRecordError):
            db.session.flush()
        db.session.rollback()
        assert StockMovement.query.count() == 1

    def test_audit_log_cannot_be_deleted(self, ctx):
        log = AuditLog.query.first()
        db.session.delete(log)
        with pytest.raises(ImmutableRecordError):
            db.session.flush()
        db.session.rollback()


class TestQueries:
    def test_list_movements_newest_first_and_filtered(self, ctx, make_item):
        a = make_item("RM", "RM-A")
        b = make_item("RM", "RM-B")
        first = stock_dao.stock_in("RM", a.id, 1, actor="tester")
        stock_dao.stock_in("RM", b.id, 2, actor="tester")
        last = stock_dao.stock_in("RM", a.id, 3, actor="tester")

        mvs = inv_dao.list_movements(ItemKind.RM, item_id=a.id)
        assert [m.id for m in mvs] == [last.id, first.id]
        assert len(inv_dao.list_movements(limit=2)) == 2

    def test_balance_map(self, ctx, make_item):
        a = make_item("RM", "RM-A")
        b = make_item("RM", "RM-B")
        stock_dao.stock_in("RM", a.id, 4, actor="tester")
        stock_dao.stock_in("RM", b.id, 6, actor="tester")
        stock_dao.stock_out("RM", b.id, 1, actor="tester")
        assert inv_dao.balance_map(ItemKind.RM) == {a.id: 4, b.id: 5}
        assert inv_dao.balance_map(ItemKind.FG) == {}


class TestSyncBalances:
    def test_fixes_drift(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        fg = make_item("FG", "FG-A")
        stock_dao.stock_in("RM", rm.id, 8, actor="tester")
        stock_dao.stock_in("FG", fg.id, 3, actor="tester")

        sb = _balance_row(rm.id)
        sb.qty_on_hand = Decimal(100)
        db.session.commit()

        changed = inv_dao.sync_balances()
        assert changed == {rm.id: 8}
        assert Decimal(str(_balance_row(rm.id).qty_on_hand)) == 8

    def test_nothing_to_fix(self, ctx, make_item):
        rm = make_item("RM", "RM-A")
        stock_dao.stock_in("RM", rm.id, 2, actor="tester")
        assert inv_dao.sync_balances([rm.id]) == {}
