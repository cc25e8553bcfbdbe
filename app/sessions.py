import secrets
import string
import threading
import time

from flask_login import UserMixin

_DIGITS = string.digits + string.ascii_lowercase


def _base36(n):
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_DIGITS[r])
    return "".join(reversed(out))


def new_token():
    # millisecond clock plus 128 random bits
    return _base36(int(time.time() * 1000)) + _base36(secrets.randbits(128))


class PortalSession(UserMixin):
    """Snapshot of a logged-in user, exposed as ``current_user``."""

    def __init__(self, token, user_id, name, role, created_at=None):
        self.token = token
        self.user_id = user_id
        self.name = name
        self.role = role
        self.created_at = created_at if created_at is not None else int(time.time() * 1000)

    def get_id(self):
        return self.token

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "name": self.name,
            "role": self.role,
            "createdAt": self.created_at,
        }


class SessionRegistry:
    """Process-lifetime token map. Nothing expires; ``clear`` drops everything."""

    def __init__(self):
        self._sessions = {}
        self._lock = threading.Lock()

    def create(self, user_id, name, role):
        with self._lock:
            token = new_token()
            while token in self._sessions:
                token = new_token()
            self._sessions[token] = PortalSession(token, user_id, name, role)
        return token

    def lookup(self, token):
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def revoke(self, token):
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def clear(self):
        with self._lock:
            self._sessions.clear()

    def __len__(self):
        with self._lock:
            return len(self._sessions)
