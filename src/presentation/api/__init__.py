"""HTTP pipeline components (middleware) for the API."""
