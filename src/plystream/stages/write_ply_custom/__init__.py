"""Custom binary PLY writing stage."""
