from trusty.validation.integrity import IntegrityValidator

__all__ = ["IntegrityValidator"]
