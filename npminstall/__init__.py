"""npminstall: npm installation process selection and node_modules layer caching."""

__version__ = "0.1.0"
