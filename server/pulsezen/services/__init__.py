"""Business logic called by the API views, tasks and management commands."""
