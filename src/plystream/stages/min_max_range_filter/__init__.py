"""Range filter stage."""
