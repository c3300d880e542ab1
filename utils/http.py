# utils/http.py
from flask import jsonify, request


def ok(message: str | None = None, status: int = 200, **data):
    body = {"ok": True}
    if message:
        body["message"] = message
    body.update(data)
    return jsonify(body), status


def fail(message: str, status: int = 400):
    return jsonify({"ok": False, "message": message}), status


def payload() -> dict:
    """Body JSON hoặc form -> dict."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def extract_lines(data: dict) -> list:
    """
    Lấy danh sách dòng từ JSON (`lines: [...]`) hoặc form
    `lines[0][item_id]`, `lines[0][qty]`, `lines[0][remark]`.
    """
    if isinstance(data.get("lines"), list):
        return data["lines"]
    rows = {}
    for key in data:
        if key.startswith("lines[") and key.endswith("][item_id]"):
            idx = key.split("[")[1].split("]")[0]
            rows[idx] = {
                "item_id": data.get(f"lines[{idx}][item_id]"),
                "qty": data.get(f"lines[{idx}][qty]"),
                "remark": data.get(f"lines[{idx}][remark]", ""),
            }
    return [rows[k] for k in sorted(rows, key=lambda s: (not s.isdigit(), s.zfill(9)))]
