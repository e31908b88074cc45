from salonbook.core.db import get_session

__all__ = ["get_session"]
