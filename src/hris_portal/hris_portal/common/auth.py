from __future__ import annotations

from functools import wraps

from flask import g, jsonify, session

from ..permissions.capabilities import resolve_actor


def login_required(employees):
    """Resolve ``g.actor`` from the signed-in employee; 401 when there is none.

    Sign-in itself belongs to the auth collaborator, which sets
    ``session["user_id"]``.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"error": "Unauthenticated", "message": "Please sign in to continue"}), 401
            employee = employees.get_by_id(str(session["user_id"]))
            if not employee or not employee.is_active:
                session.clear()
                return jsonify({"error": "Unauthenticated", "message": "Please sign in to continue"}), 401
            g.actor = resolve_actor(employee)
            return view(*args, **kwargs)

        return wrapper

    return decorator
