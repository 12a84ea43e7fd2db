"""tsclean -- clean-architecture TypeScript/Express project generator."""

__version__ = "1.0.0"
