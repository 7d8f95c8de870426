"""Genome 540 homework exercises, one module per assignment.

Each module exposes `run(inputs, context) -> list[str]`.
"""
