"""firmgen: compile declarative device descriptions into firmware source."""

__version__ = "0.1.0"
