"""herfiles: gather and install personal configuration files."""

__version__ = "0.1.0"
