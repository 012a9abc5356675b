"""LifeOS Dashboard - web surface for momentum, roadmaps, resources and the vault."""
