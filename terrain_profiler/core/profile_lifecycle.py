"""Lifecycle state machine for PathProfiler.

Uses python-statemachine so out-of-order calls fail loudly with
TransitionNotAllowed instead of producing meaningless statistics.

States:
    EMPTY: No points yet (initial)
    INITIALIZED: Points loaded, distances and turn angles computed
    RESAMPLED: Long segments subdivided
    ANALYZED: Aggregates available

Transitions:
    any state -> INITIALIZED: load_points (re-initializing discards previous results)
    INITIALIZED/RESAMPLED/ANALYZED -> RESAMPLED: resample_points
    INITIALIZED/RESAMPLED/ANALYZED -> ANALYZED: finish_analysis
"""

import logging

from statemachine import State, StateMachine

logger = logging.getLogger(__name__)


class ProfileLifecycle(StateMachine):
    """Tracks which PathProfiler operations are valid."""

    empty = State("Empty", initial=True)
    initialized = State("Initialized")
    resampled = State("Resampled")
    analyzed = State("Analyzed")

    load_points = (
        empty.to(initialized) | initialized.to(initialized) | resampled.to(initialized) | analyzed.to(initialized)
    )
    resample_points = initialized.to(resampled) | resampled.to(resampled) | analyzed.to(resampled)
    finish_analysis = initialized.to(analyzed) | resampled.to(analyzed) | analyzed.to(analyzed)

    @property
    def has_points(self) -> bool:
        """Check if points have been loaded."""
        return not self.empty.is_active

    @property
    def is_analyzed(self) -> bool:
        """Check if aggregates are available."""
        return self.analyzed.is_active

    def after_transition(self, event: str, source: State, target: State) -> None:
        logger.debug(f"Profile lifecycle: {source.id} --{event}--> {target.id}")

    def get_state_name(self) -> str:
        """Get current state name for display."""
        bound = (getattr(self, state.id) for state in self.states)
        return next(state.name for state in bound if state.is_active)
