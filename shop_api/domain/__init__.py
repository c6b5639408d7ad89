"""Pure domain helpers (slug derivation, role table)."""
