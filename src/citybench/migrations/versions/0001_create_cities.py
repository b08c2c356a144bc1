"""create cities

Revision ID: 0001_create_cities
Revises:
Create Date: 2022-10-22 13:57:00
"""

from alembic import op

revision = "0001_create_cities"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis;")
    op.execute(
        """
    CREATE TABLE cities (
        id SERIAL PRIMARY KEY,
        country TEXT NOT NULL,
        city TEXT NOT NULL,
        accent_city TEXT NOT NULL,
        region TEXT NOT NULL,
        location geometry(Point, 4326) NOT NULL
    );
    CREATE INDEX cities_location_idx ON cities USING GIST (location);
    """
    )


def downgrade():
    op.execute("DROP TABLE IF EXISTS cities;")
