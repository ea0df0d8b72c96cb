from flask import jsonify


def api_response(status_code: int, message: str, data=None, meta=None):
    """Success envelope shared by every endpoint."""
    payload = {"success": True, "statusCode": status_code, "message": message}
    if meta is not None:
        payload["meta"] = meta
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status_code
