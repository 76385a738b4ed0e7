"""Developer and player tooling."""
