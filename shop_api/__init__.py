"""Category and user management API."""
