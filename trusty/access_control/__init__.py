from trusty.access_control.engine import AccessControlEngine

__all__ = ["AccessControlEngine"]
