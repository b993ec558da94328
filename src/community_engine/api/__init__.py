"""HTTP surface for the community engine."""
