"""Vercel serverless entry points."""
