"""
Project Pulse: multi-agent project health analysis.
"""

__version__ = "0.1.0"
