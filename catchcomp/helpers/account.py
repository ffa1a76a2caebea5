from flask import session
from typing import Optional

from catchcomp.errors import NotAuthenticated


def get_user_id_for_session() -> Optional[str]:
    """
    The caller's user id, as put in the Flask session by the auth layer.
    Opaque to us: we only compare it for equality.
    """
    user_id = session.get("user_id")
    if user_id is None:
        return None

    user_id = str(user_id).strip()
    return user_id or None


def require_user_id() -> str:
    user_id = get_user_id_for_session()
    if not user_id:
        raise NotAuthenticated()
    return user_id
