"""
Core utilities shared across the blog API.

This package hosts configuration helpers (env vars, paths, limits) and the
logging setup. Routers/services should read settings from here instead of
fetching os.environ directly.
"""
