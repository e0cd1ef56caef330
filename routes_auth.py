# routes_auth.py
from flask import Blueprint, jsonify, request

from auth import login_admin, logout as end_session, resolve_identity
from errors import Unauthorized

bp = Blueprint("auth", __name__)


@bp.post("/admin-login")
def admin_login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = request.form
    identity = login_admin(data.get("username"), data.get("password"))
    if identity is None:
        raise Unauthorized("Invalid credentials")
    return jsonify(identity.to_dict())


@bp.get("/user")
def current_user():
    identity = resolve_identity()
    if identity is None:
        raise Unauthorized()
    return jsonify(identity.to_dict())


@bp.post("/logout")
def logout():
    end_session()
    return jsonify({"message": "Logged out successfully"})
