from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY
from geoalchemy2 import Geography

# revision identifiers, used by Alembic.
revision = '001_create_property_tables'
down_revision = None
branch_labels = None
depends_on = None

property_type = sa.Enum('Rooms', 'Tinyhouse', 'Apartment', 'Villa', 'Townhouse', 'Cottage', name='PropertyType')
property_status = sa.Enum('Available', 'Closed', 'UnderMaintenance', name='PropertyStatus')


def upgrade():
    op.execute('CREATE EXTENSION IF NOT EXISTS postgis')
    op.create_table(
        'Location',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('address', sa.String, nullable=False),
        sa.Column('city', sa.String, nullable=False),
        sa.Column('state', sa.String, nullable=False),
        sa.Column('country', sa.String, nullable=False),
        sa.Column('postalCode', sa.String, nullable=False),
        sa.Column('coordinates', Geography(geometry_type='POINT', srid=4326, spatial_index=False), nullable=False),
    )
    op.create_table(
        'Property',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String, nullable=False),
        sa.Column('description', sa.String, nullable=False),
        sa.Column('pricePerMonth', sa.Float, nullable=False),
        sa.Column('securityDeposit', sa.Float, nullable=False),
        sa.Column('applicationFee', sa.Float, nullable=False),
        sa.Column('cleaningFee', sa.Float, server_default='0'),
        sa.Column('photoUrls', ARRAY(sa.String), server_default='{}'),
        sa.Column('images', ARRAY(sa.String), server_default='{}'),
        sa.Column('amenities', ARRAY(sa.String), server_default='{}'),
        sa.Column('highlights', ARRAY(sa.String), server_default='{}'),
        sa.Column('isPetsAllowed', sa.Boolean, server_default=sa.false()),
        sa.Column('isParkingIncluded', sa.Boolean, server_default=sa.false()),
        sa.Column('beds', sa.Integer, nullable=False),
        sa.Column('baths', sa.Float, nullable=False),
        sa.Column('squareFeet', sa.Integer, nullable=False),
        sa.Column('propertyType', property_type, nullable=False),
        sa.Column('status', property_status, server_default='Available'),
        sa.Column('postedDate', sa.DateTime, server_default=sa.func.now()),
        sa.Column('averageRating', sa.Float, server_default='0'),
        sa.Column('numberOfReviews', sa.Integer, server_default='0'),
        sa.Column('locationId', sa.Integer, sa.ForeignKey('Location.id'), nullable=False),
        sa.Column('managerCognitoId', sa.String, nullable=False),
    )
    op.create_table(
        'Lease',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('startDate', sa.DateTime, nullable=False),
        sa.Column('endDate', sa.DateTime, nullable=False),
        sa.Column('rent', sa.Float, nullable=False),
        sa.Column('deposit', sa.Float, nullable=False),
        sa.Column('propertyId', sa.Integer, sa.ForeignKey('Property.id'), nullable=False),
        sa.Column('tenantCognitoId', sa.String, nullable=False),
    )
    op.create_index('idx_location_coordinates', 'Location', ['coordinates'], postgresql_using='gist')
    op.create_index('idx_property_location_id', 'Property', ['locationId'])
    op.create_index('idx_property_amenities', 'Property', ['amenities'], postgresql_using='gin')
    op.create_index('idx_lease_property_id', 'Lease', ['propertyId'])


def downgrade():
    op.drop_table('Lease')
    op.drop_table('Property')
    op.drop_table('Location')
    property_status.drop(op.get_bind(), checkfirst=True)
    property_type.drop(op.get_bind(), checkfirst=True)
