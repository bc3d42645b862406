#Expose the high-level pipeline pieces:
#Candidate filtering (hard rules)
#Scoring / ranking
#Matching engine, ride lifecycle and rating aggregation
#Context builder (the "one call" wiring entry point)

from .candidate_filter import build_base_candidates
from .scoring import rank_candidates
from .policy import MatchPolicy, default_match_policy, match_policy_from_env
from .matching import MatchingEngine
from .lifecycle import RideLifecycle
from .rating import RatingAggregator
from .context import DispatchContext, build_context #the main function to call to get a working engine

__all__ = [
    "build_base_candidates",
    "rank_candidates",
    "MatchPolicy",
    "default_match_policy",
    "match_policy_from_env",
    "MatchingEngine",
    "RideLifecycle",
    "RatingAggregator",
    "DispatchContext",
    "build_context",
]
