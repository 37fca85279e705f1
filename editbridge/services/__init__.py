"""Service layer helpers for editbridge workflows."""
