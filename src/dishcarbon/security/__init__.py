"""Input security checks guarding the text and image entry points."""

from dishcarbon.security.files import FileSecurityValidator
from dishcarbon.security.text import TextSecurityValidator

__all__ = ["FileSecurityValidator", "TextSecurityValidator"]
