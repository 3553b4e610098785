"""Text templates rendered into every new project."""
