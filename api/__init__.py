"""HTTP glue shared by all routers: middleware and exception handlers."""
