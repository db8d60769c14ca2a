from __future__ import annotations

from dataclasses import dataclass

from pydantic import ValidationError

from .base_agent import BaseAgent
from .registry import resolve_agent_class
from .spec import AgentSpec


@dataclass
class PreparedAgent:
    """An instantiated agent together with the spec that produced it."""

    spec: AgentSpec
    agent: BaseAgent


def create_agent_from_spec(spec: AgentSpec) -> PreparedAgent:
    """
    Instantiate the agent described by `spec`.

    Raises:
        ValueError: Unknown agent type or invalid parameters (including a
            non-positive ply count for the minimax agent)
    """
    agent_cls = resolve_agent_class(spec.type)
    try:
        agent = agent_cls(team=spec.team, name=spec.name, **spec.params)
    except (ValidationError, TypeError) as exc:
        raise ValueError(f"Invalid parameters for {spec.type} agent: {exc}") from exc
    return PreparedAgent(spec=spec, agent=agent)
