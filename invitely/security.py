"""
Shared-secret bearer checks for the cron trigger and host endpoints.

Caller identity and roles belong to the surrounding auth layer; these checks
only keep the endpoints from being open when a secret is configured.
"""

import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from invitely.config.settings import settings

bearer_scheme = HTTPBearer(auto_error=False)


def _check_bearer(expected: str, credentials: HTTPAuthorizationCredentials | None) -> None:
    if not expected:
        return
    if credentials is None or not secrets.compare_digest(credentials.credentials, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def verify_cron_secret(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> None:
    _check_bearer(settings.CRON_SECRET, credentials)


def verify_admin_secret(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> None:
    _check_bearer(settings.ADMIN_SECRET, credentials)
