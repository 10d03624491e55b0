"""Blog backend: posts, tags and role-based access control over FastAPI."""
