"""Community management engine: communities, memberships and role rules."""

__version__ = "0.1.0"
