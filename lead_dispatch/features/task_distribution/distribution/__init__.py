from .engine import compute_quotas, distribute

__all__ = ["compute_quotas", "distribute"]
