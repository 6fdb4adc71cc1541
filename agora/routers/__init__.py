"""
FastAPI routers grouped by domain (posts, projects, discussions, members...).

Each module exposes an APIRouter that the app factory includes according to
the configured preset. Routers only translate HTTP into service calls; the
error envelope is produced by the app-level exception handlers.
"""
