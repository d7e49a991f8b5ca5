"""BagTag golf equipment inventory service."""

__all__ = []
