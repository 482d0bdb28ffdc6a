"""HTTP blueprints for the API resources."""
