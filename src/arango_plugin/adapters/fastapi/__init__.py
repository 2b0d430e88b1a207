"""FastAPI adapter – exception mapper."""
from arango_plugin.adapters.fastapi.exception_mapper import FastAPIExceptionMapper

__all__ = ["FastAPIExceptionMapper"]
