"""Backend registry for breaking circular imports.

This module holds the backend instance so that routes can reach it
without importing the main module.
"""

# Global backend instance - set by main.create_app during initialization
backend = None


def set_backend(backend_instance):
    """Set the global backend instance."""
    global backend
    backend = backend_instance


def get_backend():
    """Get the global backend instance."""
    if backend is None:
        raise RuntimeError("Backend not initialized. Did you call set_backend?")
    return backend
