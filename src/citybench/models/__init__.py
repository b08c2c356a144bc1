from .base import Base
from .city import SRID, City

__all__ = ["Base", "City", "SRID"]
