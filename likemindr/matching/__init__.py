"""
Matching engine: ranks readers of the same book by compatibility and
explains each match.

Modules
-------
factors    : ScoringFactor + the four scoring components and shared signals.
scorer     : ScoreBreakdown / ScoredCandidate + compute_score() — pure, no I/O.
filter     : filter_by_threshold().
ranker     : rank_candidates() — deterministic top-N.
reasons    : generate_reason() + is_active_reader().
engine     : MatchResult + find_matches() — the full pipeline.
pool       : MatchRequest JSON loading + eligible_candidates() for callers.
formatters : CLI table / JSON rendering.
exceptions : MatchValidationError, MatchCancelledError.
"""
