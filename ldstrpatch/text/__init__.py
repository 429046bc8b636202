"""Text replacement components.

This package provides scoped regex replacement for string constants and URL
prefix redirection for plain text files.
"""

from .replace import ScopedReplacement, replace_urls, translate_replacement_template

__all__ = ["ScopedReplacement", "replace_urls", "translate_replacement_template"]
