"""Blob Gateway: HTTP upload, list and delete over Vercel Blob."""

__version__ = "1.0.0"
