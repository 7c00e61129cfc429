"""
Stats API pipeline: identifier extraction, per-entity detail fetch and
ranking for the daily home run, leaderboard and starting pitcher views.

Nothing in here touches the database; see `dinger_api.services.refresh` for
persistence.
"""

from .homeruns import collect_daily_homeruns  # noqa: F401
from .leaders import collect_leaderboard, competition_ranks, rank_leaders  # noqa: F401
from .pitchers import collect_starting_pitchers  # noqa: F401
from .stats_api import StatsApiClient  # noqa: F401
