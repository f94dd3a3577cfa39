"""Contact form validation and notification service."""
