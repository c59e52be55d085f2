"""Calendar Engine application package."""
