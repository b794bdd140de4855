"""
Widget snapshot data structures
"""
from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field


class SummarySnapshot(BaseModel):
    """
    Read-only summary replicated to the home screen widget. It is a cache and never
    authoritative.
    """

    journaled_days: List[int] = Field(default_factory=list)
    total_entries: int = 0
    current_streak: int = 0
    monthly_entries: Dict[str, int] = Field(default_factory=dict)
    last_sync: datetime
