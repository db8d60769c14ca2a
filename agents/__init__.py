"""
Agent interface and implementations for the skirmish arena.

This module provides:
- BaseAgent: Abstract interface for all agents
- MinimaxAgent: Depth-limited adversarial search with alpha-beta pruning
- PursuitAgent: Scripted chaser built on the A* planner
- RandomAgent: Simple random action agent for testing
"""

from .base_agent import BaseAgent
from .factory import PreparedAgent, create_agent_from_spec

from .registry import register_agent, resolve_agent_class, registered_agent_types
from .spec import AgentSpec
from .minimax_agent import MinimaxAgent, SearchConfig
from .pursuit_agent import PursuitAgent
from .random_agent import RandomAgent

__all__ = [
    "BaseAgent",
    "AgentSpec",
    "PreparedAgent",
    "create_agent_from_spec",
    "register_agent",
    "resolve_agent_class",
    "registered_agent_types",
    "MinimaxAgent",
    "SearchConfig",
    "PursuitAgent",
    "RandomAgent",
]
