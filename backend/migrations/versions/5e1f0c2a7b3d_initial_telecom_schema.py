"""initial_telecom_schema

Revision ID: 5e1f0c2a7b3d
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5e1f0c2a7b3d'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'islands',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('alt_name', sa.String(length=120), nullable=True),
        sa.Column('code', sa.String(length=40), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('long', sa.Float(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    op.create_table(
        'provinces',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('island_id', sa.Integer(), nullable=True),
        sa.Column('capital', sa.String(length=120), nullable=True),
        sa.ForeignKeyConstraint(['island_id'], ['islands.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_provinces_island_id'), 'provinces', ['island_id'], unique=False)

    op.create_table(
        'regencies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('province_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(['province_id'], ['provinces.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_regencies_province_id'), 'regencies', ['province_id'], unique=False)

    op.create_table(
        'districts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('regency_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['regency_id'], ['regencies.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_districts_regency_id'), 'districts', ['regency_id'], unique=False)

    op.create_table(
        'villages',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('district_id', sa.Integer(), nullable=True),
        sa.Column('postal_code', sa.String(length=10), nullable=True),
        sa.ForeignKeyConstraint(['district_id'], ['districts.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_villages_district_id'), 'villages', ['district_id'], unique=False)

    op.create_table(
        'bts_towers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('cell_id', sa.String(length=40), nullable=False),
        sa.Column('lac', sa.String(length=40), nullable=False),
        sa.Column('mcc', sa.String(length=3), nullable=False),
        sa.Column('mnc', sa.String(length=3), nullable=False),
        sa.Column('lat', sa.Float(), nullable=False),
        sa.Column('long', sa.Float(), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('village_id', sa.Integer(), nullable=True),
        sa.Column('operator', sa.String(length=60), nullable=False),
        sa.Column('network_type', sa.String(length=3), nullable=False),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('coverage_radius', sa.Integer(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['village_id'], ['villages.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bts_towers_village_id'), 'bts_towers', ['village_id'], unique=False)
    op.create_index(op.f('ix_bts_towers_operator'), 'bts_towers', ['operator'], unique=False)
    op.create_index(op.f('ix_bts_towers_updated_at'), 'bts_towers', ['updated_at'], unique=False)

    op.create_table(
        'msisdn_data',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('msisdn', sa.String(length=20), nullable=False),
        sa.Column('imsi', sa.String(length=20), nullable=False),
        sa.Column('imei', sa.String(length=20), nullable=False),
        sa.Column('iccid', sa.String(length=22), nullable=True),
        sa.Column('provider', sa.String(length=60), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('registered_name', sa.String(length=120), nullable=True),
        sa.Column('registered_nik', sa.String(length=20), nullable=True),
        sa.Column('last_bts_id', sa.Integer(), nullable=True),
        sa.Column('last_active', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['last_bts_id'], ['bts_towers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_msisdn_data_msisdn'), 'msisdn_data', ['msisdn'], unique=True)
    op.create_index(op.f('ix_msisdn_data_last_bts_id'), 'msisdn_data', ['last_bts_id'], unique=False)

    op.create_table(
        'api_keys',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=128), nullable=False),
        sa.Column('owner', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('usage_limit', sa.Integer(), nullable=False),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('permission_bits', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_api_keys_key'), 'api_keys', ['key'], unique=True)
    op.create_index(op.f('ix_api_keys_status'), 'api_keys', ['status'], unique=False)

    op.create_table(
        'operators',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_operators_email'), 'operators', ['email'], unique=True)


def downgrade():
    op.drop_index(op.f('ix_operators_email'), table_name='operators')
    op.drop_table('operators')
    op.drop_index(op.f('ix_api_keys_status'), table_name='api_keys')
    op.drop_index(op.f('ix_api_keys_key'), table_name='api_keys')
    op.drop_table('api_keys')
    op.drop_index(op.f('ix_msisdn_data_last_bts_id'), table_name='msisdn_data')
    op.drop_index(op.f('ix_msisdn_data_msisdn'), table_name='msisdn_data')
    op.drop_table('msisdn_data')
    op.drop_index(op.f('ix_bts_towers_updated_at'), table_name='bts_towers')
    op.drop_index(op.f('ix_bts_towers_operator'), table_name='bts_towers')
    op.drop_index(op.f('ix_bts_towers_village_id'), table_name='bts_towers')
    op.drop_table('bts_towers')
    op.drop_index(op.f('ix_villages_district_id'), table_name='villages')
    op.drop_table('villages')
    op.drop_index(op.f('ix_districts_regency_id'), table_name='districts')
    op.drop_table('districts')
    op.drop_index(op.f('ix_regencies_province_id'), table_name='regencies')
    op.drop_table('regencies')
    op.drop_index(op.f('ix_provinces_island_id'), table_name='provinces')
    op.drop_table('provinces')
    op.drop_table('islands')
