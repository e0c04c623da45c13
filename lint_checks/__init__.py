"""Lint check run report rendering and publishing."""
