"""Session handling for the admin surface.

Sessions are HS256 JWTs signed with the store key. The provider can issue
them (sign-in), verify them, revoke them (sign-out) and tell listeners when
either happens.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from uuid import uuid4

import jwt

from nightmarket.utils.log import get_logger

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

log = get_logger("identity")


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    access_token: str
    expires_at: int
    email: Optional[str] = None
    session_id: Optional[str] = None


Listener = Callable[[str, Optional[AuthSession]], None]


class Subscription:
    """Handle returned by IdentityProvider.subscribe; unsubscribe() may be called repeatedly."""

    def __init__(self, provider: "IdentityProvider", token: int):
        self._provider = provider
        self._token = token
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._provider._remove_listener(self._token)


class IdentityProvider:
    def __init__(self, secret: str, ttl_seconds: int = 3600, algorithm: str = "HS256"):
        self.secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm
        self._lock = threading.Lock()
        self._listeners: Dict[int, Listener] = {}
        self._owners: Dict[str, Subscription] = {}
        # jti -> exp, pruned of expired entries on sign_out
        self._revoked: Dict[str, int] = {}
        self._next_token = 0

    def issue(self, user_id: str, email: Optional[str] = None) -> AuthSession:
        now = int(time.time())
        jti = uuid4().hex
        payload = {"sub": user_id, "iat": now, "exp": now + self.ttl_seconds, "jti": jti}
        if email:
            payload["email"] = email
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        session = AuthSession(
            user_id=user_id,
            access_token=token,
            expires_at=payload["exp"],
            email=email,
            session_id=jti,
        )
        self._emit(SIGNED_IN, session)
        return session

    def get_session(self, token: Optional[str]) -> Optional[AuthSession]:
        """Return the session for a bearer token, or None if it is invalid, expired or revoked."""
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.PyJWTError as e:
            log.debug("Rejected session token: %s", e)
            return None
        jti = claims.get("jti")
        if jti and jti in self._revoked:
            return None
        return AuthSession(
            user_id=str(claims["sub"]),
            access_token=token,
            expires_at=int(claims["exp"]),
            email=claims.get("email"),
            session_id=jti,
        )

    def sign_out(self, token: Optional[str]) -> bool:
        session = self.get_session(token)
        if session is None:
            return False
        if session.session_id:
            now = int(time.time())
            with self._lock:
                self._revoked = {jti: exp for jti, exp in self._revoked.items() if exp > now}
                self._revoked[session.session_id] = session.expires_at
        self._emit(SIGNED_OUT, None)
        return True

    def subscribe(self, listener: Listener, owner: Optional[str] = None) -> Subscription:
        """
        Register a listener for SIGNED_IN / SIGNED_OUT changes.
        With an owner key, any earlier listener of the same owner is cancelled
        first so each owner has at most one live listener.
        """
        with self._lock:
            previous = self._owners.pop(owner, None) if owner else None
        if previous is not None:
            previous.unsubscribe()
        with self._lock:
            self._next_token += 1
            sub = Subscription(self, self._next_token)
            self._listeners[sub._token] = listener
            if owner:
                self._owners[owner] = sub
        return sub

    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def _remove_listener(self, token: int) -> None:
        with self._lock:
            self._listeners.pop(token, None)
            for owner, sub in list(self._owners.items()):
                if sub._token == token:
                    del self._owners[owner]

    def _emit(self, event: str, session: Optional[AuthSession]) -> None:
        with self._lock:
            listeners = list(self._listeners.values())
        for listener in listeners:
            try:
                listener(event, session)
            except Exception:
                log.exception("Session listener failed for %s", event)
