"""Exercise dispatch.

Modules:
- exercise: Exercise value types and errors
- registry: Registered exercises and selector validation
- runner: Input resolution and timed execution
"""

__all__ = [
    "exercise",
    "registry",
    "runner",
]
