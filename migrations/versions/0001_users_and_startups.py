from alembic import op
import sqlalchemy as sa

revision = "0001_users_and_startups"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('username', sa.String, nullable=False),
        sa.Column('hashed_password', sa.String, nullable=False),
        sa.Column('avatar', sa.String, nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'startup',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('tagline', sa.String(length=160), nullable=False),
        sa.Column('industry', sa.String, nullable=False),
        sa.Column('stage', sa.String, nullable=False),
        sa.Column('founded_date', sa.Date, nullable=False),
        sa.Column('business_model', sa.String, nullable=False),
        sa.Column('funding_status', sa.String, nullable=False),
        sa.Column('funding_amount', sa.Float, nullable=False),
        sa.Column('revenue_model', sa.String(length=1000), nullable=False),
        sa.Column('years_in_op', sa.Float, nullable=False),
        sa.Column('preferred_contact_method', sa.JSON, nullable=False),
        sa.Column('newsletter_subscription', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('cover_image_data', sa.LargeBinary, nullable=True),
        sa.Column('cover_image_content_type', sa.String, nullable=True),
        sa.Column('cover_image_file_name', sa.String, nullable=True),
        sa.Column('pitch_deck_data', sa.LargeBinary, nullable=True),
        sa.Column('pitch_deck_content_type', sa.String, nullable=True),
        sa.Column('pitch_deck_file_name', sa.String, nullable=True),
        sa.Column('startup_owner', sa.Integer, sa.ForeignKey('user.id'), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_startup_name', 'startup', ['name'], unique=True)
    op.create_index('ix_startup_startup_owner', 'startup', ['startup_owner'])


def downgrade():
    op.drop_index('ix_startup_startup_owner', table_name='startup')
    op.drop_index('ix_startup_name', table_name='startup')
    op.drop_table('startup')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
