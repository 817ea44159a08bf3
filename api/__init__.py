"""Vercel entry point: exposes the FastAPI app from api.index."""
