from geoalchemy2 import Geometry
from sqlalchemy import Column, Integer, Text

from citybench.models.base import Base

SRID = 4326


class City(Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    country = Column(Text, nullable=False)
    city = Column(Text, nullable=False)
    accent_city = Column(Text, nullable=False)
    region = Column(Text, nullable=False)
    # the GIST index is created by the migration, not by metadata
    location = Column(
        Geometry(geometry_type="POINT", srid=SRID, spatial_index=False),
        nullable=False,
    )
