"""
Analysis modules for the AI readiness crawl.
This package contains the page content analyzers, the robots.txt policy analyzer and the readiness synthesizer.
"""

from app.services.analysis.robots_txt import RobotsTxtAnalyzer
from app.services.analysis.ai_readiness import analyze_ai_readiness

__all__ = [
    "RobotsTxtAnalyzer",
    "analyze_ai_readiness"
]
