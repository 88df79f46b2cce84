"""
High-level use cases for the blog API.

Each service module orchestrates repositories and domain rules to implement
the operations (add topic, delete category, store an upload, ...). Routers
call these services instead of manipulating the JSON document directly.
"""
