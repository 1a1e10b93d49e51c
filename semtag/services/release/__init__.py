"""Version computation and release publishing."""
