"""Blog content store: categories, topics and image uploads over one JSON document."""
