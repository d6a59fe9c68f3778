# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: errors.py
# -----------------------------------------------------------------------------
from fastapi import HTTPException


def to_http_exception(e: Exception, action: str) -> HTTPException:
    if isinstance(e, (LookupError, FileNotFoundError)):
        return HTTPException(status_code=404, detail=f"{action} failed: {e}")
    if isinstance(e, (ValueError, TypeError)):
        return HTTPException(status_code=400, detail=f"{action} failed: {e}")
    return HTTPException(status_code=500, detail=f"{action} failed: {e}")
