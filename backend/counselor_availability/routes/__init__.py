from . import weekly_availability

__all__ = ["weekly_availability"]
