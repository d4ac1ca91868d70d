"""
Resource methods.

Components:
    - Models: generate_content(_stream), embed_content, generate_images, get, list
    - Files: upload, get, list, delete (Gemini Developer API only)
    - Caches: create, get, list, delete
    - Tunings: tune, get, list
"""

from .caches import Caches
from .files import Files
from .models import Models
from .tunings import Tunings


__all__ = [
    "Caches",
    "Files",
    "Models",
    "Tunings",
]
