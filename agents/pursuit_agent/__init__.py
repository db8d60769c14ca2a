from .pursuit_agent import PursuitAgent

__all__ = ["PursuitAgent"]
