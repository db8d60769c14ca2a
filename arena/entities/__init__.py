from .unit import Unit, ATTACKER_RANGE, DEFENDER_RANGE

__all__ = ["Unit", "ATTACKER_RANGE", "DEFENDER_RANGE"]
