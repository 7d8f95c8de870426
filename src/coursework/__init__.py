"""Genome 540 homework and Advent of Code 2022 exercises."""

__version__ = "0.1.0"
