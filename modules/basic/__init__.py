from .module import BasicModule

__all__ = ["BasicModule"]
