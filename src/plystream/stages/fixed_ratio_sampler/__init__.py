"""Fixed ratio sampler stage."""
