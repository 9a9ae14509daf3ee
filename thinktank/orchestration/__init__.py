"""Orchestration layer - lifecycle state machine and public read queries."""

from thinktank.orchestration.state_machine import StateMachine, can_transition, valid_transitions
from thinktank.orchestration.query_facade import QueryFacade

__all__ = [
    "QueryFacade",
    "StateMachine",
    "can_transition",
    "valid_transitions",
]
