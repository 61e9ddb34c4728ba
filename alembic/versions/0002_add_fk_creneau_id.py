from alembic import op

revision = '0002_add_fk_creneau_id'
down_revision = '0001_init'
branch_labels = None
depends_on = None

def upgrade():
    # colis.creneau_id -> creneaux_expedition.id; a slot with packages cannot be deleted
    op.create_foreign_key(
        'fk_colis_creneau_id_creneaux_expedition',
        source_table='colis',
        referent_table='creneaux_expedition',
        local_cols=['creneau_id'],
        remote_cols=['id'],
        ondelete='RESTRICT'
    )

def downgrade():
    op.drop_constraint('fk_colis_creneau_id_creneaux_expedition', 'colis', type_='foreignkey')
