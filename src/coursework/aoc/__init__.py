"""Advent of Code 2022 puzzles, one module per day."""
