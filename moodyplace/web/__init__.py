"""Веб-слой: страницы, статика, middleware, health checks."""
