"""Organization CMS backend: structure resolution and public content API."""

__version__ = "1.0.0"
