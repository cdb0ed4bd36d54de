"""User-facing front ends for burrow sessions."""
