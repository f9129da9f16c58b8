# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Error taxonomy shared by the service layer, the API and the CLI."""

from __future__ import annotations
from typing import Any, Dict


class GqError(Exception):
    """Base error; carries the HTTP status and the envelope code."""
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "", *, code: str | None = None,
                 details: Dict[str, Any] | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        if code:
            self.code = code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"ok": False, "code": self.code, "error": self.message}
        if self.details:
            out["details"] = self.details
        return out


class NotFound(GqError):
    status_code = 404
    code = "not_found"


class BadRequest(GqError):
    status_code = 400
    code = "bad_request"


class InvalidFilterError(BadRequest, ValueError):
    """A filter token whose pattern is not a valid regular expression."""
    code = "invalid_filter"

    def __init__(self, token: str, reason: str):
        super().__init__(
            f"invalid filter pattern in '{token}': {reason}",
            details={"token": token, "reason": reason},
        )
        self.token = token
        self.reason = reason
