from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, Request

from agora.core.utils import now_iso
from agora.routers import deps

router = APIRouter(prefix="/api", tags=["insights"])


@router.get("/analytics")
def analytics(request: Request):
    return {"success": True, "analytics": deps.analytics(request).analytics(), "timestamp": now_iso()}


@router.get("/search")
def search(request: Request, q: Optional[str] = None, type_: Optional[str] = Query(None, alias="type")):
    results = deps.analytics(request).search(q, type_)
    return {
        "success": True,
        "query": q,
        "results": results,
        "count": sum(len(v) for v in results.values()),
    }
