"""
Agent registry.

Agent classes register themselves under a short type name so scenarios
can reference them from JSON (``{"type": "minimax", ...}``).
"""

from __future__ import annotations

from typing import Callable, Dict, Type, TypeVar

from .base_agent import BaseAgent

AgentT = TypeVar("AgentT", bound=Type[BaseAgent])

_REGISTRY: Dict[str, Type[BaseAgent]] = {}


def register_agent(type_name: str) -> Callable[[AgentT], AgentT]:
    """Class decorator that registers an agent under `type_name`."""

    def decorator(cls: AgentT) -> AgentT:
        key = type_name.lower()
        existing = _REGISTRY.get(key)
        if existing is not None and existing is not cls:
            raise ValueError(f"Agent type '{type_name}' already registered to {existing.__name__}")
        _REGISTRY[key] = cls
        return cls

    return decorator


def resolve_agent_class(type_name: str) -> Type[BaseAgent]:
    """
    Look up a registered agent class.

    Raises:
        ValueError: If no agent is registered under that name
    """
    try:
        return _REGISTRY[type_name.lower()]
    except KeyError:
        known = ", ".join(sorted(_REGISTRY)) or "<none>"
        raise ValueError(f"Unknown agent type '{type_name}' (known: {known})") from None


def registered_agent_types() -> list[str]:
    return sorted(_REGISTRY)
