"""
Ranking: blend distance, interest, engagement, and recency into a sorted list.

Public API: rank_candidates, score_candidates, build_score_breakdown.
- core: main orchestration (rank_candidates).
- Submodules: components (per-factor scores), blended_scoring (ScoreBreakdown).
"""

from .blended_scoring import build_score_breakdown
from .core import order_by_start_time, rank_candidates, score_candidates

__all__ = [
    "build_score_breakdown",
    "order_by_start_time",
    "rank_candidates",
    "score_candidates",
]
