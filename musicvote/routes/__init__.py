"""HTTP routers: HTML pages and public debug endpoints."""
