"""FastAPI routers, one per API area."""
