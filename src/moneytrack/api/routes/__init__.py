"""API route modules; each exposes ``register_routes(app)``."""
