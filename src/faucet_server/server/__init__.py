from .app import Server

__all__ = ["Server"]
