# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: search.py
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    query: str = Field(..., min_length=1)


class SearchResponse(BaseModel):
    query: str
    topic: str
    description: str


class SearchRecordsRequest(BaseModel):
    query: str = Field(..., min_length=1)
    top: int = Field(5, ge=1, le=50)
    score_threshold: int = Field(0, ge=0, le=100)
    where: Optional[Dict[str, Any]] = None


class SearchHit(BaseModel):
    description: str
    score: float


class SearchRecordsResponse(BaseModel):
    query: str
    topic: str
    results: List[SearchHit]
