from datetime import date, datetime, timezone

from flask import abort, request


def payload():
    """JSON body when sent as JSON, otherwise the form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def text_field(data, field):
    """Field as stripped text; JSON numbers are kept as their string form."""
    value = data.get(field)
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def uploaded_file(field):
    f = request.files.get(field)
    if f is None or not f.filename:
        return None
    return f


def to_int(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        abort(400, f"{field} must be an integer")


def parse_datetime(value, field):
    try:
        dt = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        abort(400, f"{field} must be an ISO-8601 timestamp")
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def parse_date(value, field):
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        abort(400, f"{field} must be an ISO date (YYYY-MM-DD)")
