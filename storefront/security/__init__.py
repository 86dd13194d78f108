# Security modules

from .auth import BearerUser, guest_session, issue_token, read_guest_session, require_user

__all__ = ["BearerUser", "guest_session", "issue_token", "read_guest_session", "require_user"]
