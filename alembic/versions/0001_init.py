from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'reservations',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('destination', sa.String(200), nullable=False),
        sa.Column('nom', sa.String(100), nullable=False),
        sa.Column('prenom', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('telephone', sa.String(50), nullable=False),
        sa.Column('lieu_depart', sa.String(200), nullable=False),
        sa.Column('date_depart', sa.Date, nullable=False),
        sa.Column('date_retour', sa.Date, nullable=True),
        sa.Column('nombre_passagers', sa.Integer, nullable=False),
        sa.Column('classe', sa.String(30), nullable=False),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('nombre_passagers > 0', name='ck_reservations_nombre_passagers_positive'),
    )
    op.create_table(
        'creneaux_expedition',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('heure_depart', sa.Time, nullable=False),
        sa.Column('lieu_depart', sa.String(200), nullable=False),
        sa.Column('destination', sa.String(200), nullable=False),
        sa.Column('capacite_max', sa.Integer, nullable=False),
        sa.Column('frais_par_kg', sa.Numeric(10, 2), nullable=False),
        sa.Column('poids_max_colis', sa.Numeric(10, 2), nullable=False),
        sa.Column('type_transport', sa.String(30), nullable=False, server_default='standard'),
        sa.Column('date_expedition', sa.Date, nullable=False),
        sa.Column('date_creation', sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('capacite_max > 0', name='ck_creneaux_capacite_max_positive'),
    )
    op.create_table(
        'colis',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('creneau_id', sa.Integer, nullable=True),
        sa.Column('numero_suivi', sa.String(50), nullable=False),
        sa.Column('nom_expediteur', sa.String(200), nullable=False),
        sa.Column('telephone_expediteur', sa.String(50), nullable=False),
        sa.Column('adresse_expediteur', sa.String(500), nullable=False),
        sa.Column('nom_destinataire', sa.String(200), nullable=False),
        sa.Column('telephone_destinataire', sa.String(50), nullable=False),
        sa.Column('adresse_destinataire', sa.String(500), nullable=False),
        sa.Column('type_colis', sa.String(30), nullable=False, server_default='document'),
        sa.Column('poids', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('valeur_declaree', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('assurance', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('methode_paiement', sa.String(30), nullable=False, server_default='especes'),
        sa.Column('statut', sa.String(30), nullable=False, server_default='en_attente'),
        sa.Column('date_creation', sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_colis_numero_suivi', 'colis', ['numero_suivi'], unique=True)
    op.create_index('ix_colis_creneau_id', 'colis', ['creneau_id'])

def downgrade():
    op.drop_index('ix_colis_creneau_id', table_name='colis')
    op.drop_index('ix_colis_numero_suivi', table_name='colis')
    op.drop_table('colis')
    op.drop_table('creneaux_expedition')
    op.drop_table('reservations')
