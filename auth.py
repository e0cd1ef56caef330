"""Identity resolution and the admin gate.

Two authorities can vouch for a request, tried in a fixed order:

1. the signed session cookie set by ``/api/auth/admin-login`` for one of
   the configured ``ADMIN_ACCOUNTS``;
2. an ``Authorization: Bearer`` token issued by the external identity
   provider, admin only when its subject or e-mail is allow-listed.

The first resolver that returns an identity wins.
"""
from dataclasses import dataclass

from flask import current_app, g, request, session
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash

import storage
from errors import Unauthorized
from models import User, db


@dataclass
class Identity:
    user: User
    is_admin: bool
    source: str

    def to_dict(self):
        return {**self.user.to_dict(), "isAdmin": self.is_admin}


def session_identity():
    user_id = session.get("user_id")
    if not user_id or user_id not in current_app.config["ADMIN_ACCOUNTS"]:
        return None
    user = storage.get_user(user_id)
    if user is None:
        return None
    return Identity(user, bool(session.get("is_admin")), "session")


def _bearer_token():
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def token_identity():
    token = _bearer_token()
    secret = current_app.config.get("TOKEN_SECRET")
    if not token or not secret:
        return None
    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=current_app.config["TOKEN_ALGORITHMS"],
            audience=current_app.config.get("TOKEN_AUDIENCE"),
            issuer=current_app.config.get("TOKEN_ISSUER"),
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        current_app.logger.warning("Rejected identity token: %s", e)
        return None

    try:
        user = storage.upsert_user(
            claims["sub"],
            email=claims.get("email"),
            first_name=claims.get("first_name"),
            last_name=claims.get("last_name"),
            profile_image_url=claims.get("profile_image_url"),
        )
    except IntegrityError:
        # e-mail already belongs to another user row
        db.session.rollback()
        current_app.logger.warning("Identity token for %r clashes with an existing user", claims["sub"])
        return None
    allowlist = current_app.config.get("TOKEN_ADMIN_ALLOWLIST") or []
    is_admin = user.id in allowlist or (user.email is not None and user.email in allowlist)
    return Identity(user, is_admin, "token")


IDENTITY_RESOLVERS = (session_identity, token_identity)


def resolve_identity():
    """Identity of the current request, or None. Cached on ``flask.g``."""
    if "identity" not in g:
        g.identity = None
        for resolver in IDENTITY_RESOLVERS:
            identity = resolver()
            if identity is not None:
                g.identity = identity
                break
    return g.identity


def require_admin():
    # one answer for every failure: no session, bad token, not allow-listed
    identity = resolve_identity()
    if identity is None or not identity.is_admin:
        raise Unauthorized()
    return identity


def login_admin(username, password):
    """Check configured admin credentials and open a session. Returns Identity or None."""
    account = current_app.config["ADMIN_ACCOUNTS"].get(username or "")
    if not account or not check_password_hash(account["password_hash"], password or ""):
        current_app.logger.warning("Failed admin login for %r", username)
        return None

    user = storage.upsert_user(
        username,
        email=account.get("email"),
        first_name=account.get("first_name"),
        last_name=account.get("last_name"),
        is_admin=True,
    )
    session.clear()
    session.permanent = True
    session["user_id"] = user.id
    session["is_admin"] = True
    g.pop("identity", None)
    current_app.logger.info("Admin %s logged in", user.id)
    return Identity(user, True, "session")


def logout():
    session.clear()
    g.pop("identity", None)
