"""Shared domain building blocks: exceptions and ports."""
