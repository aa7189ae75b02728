"""
BlogChecker Processing Module
=============================

Techword matching and the feed filter pipeline.
"""

from .techwords import TechwordPattern, TechwordPatternProvider, compile_techwords, count_techwords
from .pipeline import FeedFilterPipeline

__all__ = [
    'TechwordPattern',
    'TechwordPatternProvider',
    'compile_techwords',
    'count_techwords',
    'FeedFilterPipeline',
]
