"""Shared engine instance for the API routers."""
from ..engine import FeeEngine

engine = FeeEngine()
