"""
Content — Static text content for console display

Text is data, not code embedded in methods.
"""

from .help_text import ABOUT_TEXT, HELP_TEXT

__all__ = ['ABOUT_TEXT', 'HELP_TEXT']
