"""TaskHub - task management backend with pluggable storage and event publishing."""

__version__ = "1.0.0"
