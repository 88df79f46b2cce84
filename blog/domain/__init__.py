"""Pure domain helpers: slugs, validation rules and integrity checks."""
