# utils/dates.py
from datetime import date, datetime


def today() -> date:
    return date.today()


def parse_date(value, default: date | None = None) -> date | None:
    """Nhận date / chuỗi ISO 'YYYY-MM-DD'; rỗng thì trả default."""
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValueError(f"Ngày không hợp lệ: {value!r}")


def normalize_group(g) -> str:
    return "".join(str(g or "").split()).upper()
