"""sqlbrick safety layer: heuristic vetting of composed SQL."""
from sqlbrick.safety.scanner import (
    DEFAULT_POLICY,
    SafetyCheck,
    SafetyPolicy,
    SafetyScanner,
    add_safety_check,
    add_safety_pattern,
)

__all__ = [
    "DEFAULT_POLICY",
    "SafetyCheck",
    "SafetyPolicy",
    "SafetyScanner",
    "add_safety_check",
    "add_safety_pattern",
]
