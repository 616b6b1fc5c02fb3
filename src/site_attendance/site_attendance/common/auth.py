from __future__ import annotations

from functools import wraps

from flask import session

from .responses import error_response


def login_required(view):
    """JSON endpoints only: a missing session is a 401, not a redirect."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get("person_id"):
            return error_response("unauthorized", 401)
        return view(*args, **kwargs)

    return wrapper
