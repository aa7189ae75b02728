"""
BlogChecker Ingestion Module
============================

Everything between a site URL and a list of clean feed entries.

This module handles:
- Feed URL resolution and discovery
- Bounded-redirect HTTP fetching
- Feed parsing and markup stripping
- Techword list loading
"""
