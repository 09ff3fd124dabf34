"""API module - cross-cutting HTTP plumbing.

Middleware that wraps every request, independent of the versioned routers.
"""
