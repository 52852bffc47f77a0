"""pubflow - publish local WebGL builds to a hosted repository."""

__version__ = "0.1.0"
