#!/usr/bin/env python3
"""
sensorboard Audit Trail

JSON records for sign-in attempts, sign-outs and script edits, written to
the "sensorboard.audit" logger. Password material never enters a record.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

from fastapi import Request


def request_context(request: Optional[Request]) -> Dict[str, Any]:
    """Who and where: remote address, user agent, method and path."""
    if request is None:
        return {}
    return {
        "client_ip": request.client.host if request.client else "unknown",
        "user_agent": request.headers.get("user-agent", "unknown"),
        "method": request.method,
        "url": str(request.url),
    }


class AuditLogger:
    """Audit trail for dashboard users."""

    def __init__(self, name: str = "sensorboard.audit"):
        self.logger = logging.getLogger(name)

    def record(self, event: str, request: Optional[Request] = None, **fields: Any) -> Dict[str, Any]:
        entry = {"timestamp": int(time.time()), "event": event, **fields}
        entry.update(request_context(request))
        self.logger.info(json.dumps(entry, ensure_ascii=False, default=str))
        return entry

    def sign_in(self, success: bool, username: str, request: Optional[Request] = None):
        self.record("sign_in", request, username=username, success=success)

    def sign_out(self, username: Optional[str], request: Optional[Request] = None):
        self.record("sign_out", request, username=username)

    def script_change(self, action: str, name: str, details: Dict[str, Any], request: Optional[Request] = None):
        """action is "upsert" or "delete"."""
        self.record("script_change", request, action=action, script=name, **details)


audit_logger = AuditLogger()
