# signals.py
from blinker import Namespace

stock_signals = Namespace()

# Gửi sau khi commit 1 nghiệp vụ kho.
# kwargs: items=[(ItemKind, item_id), ...], ref_type=str, ref_id=str
ledger_changed = stock_signals.signal("ledger-changed")
