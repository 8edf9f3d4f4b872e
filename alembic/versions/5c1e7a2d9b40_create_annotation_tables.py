"""create users, labels, label_relations, documents, annotations

Revision ID: 5c1e7a2d9b40
Revises: 
Create Date: 2026-10-16 10:12:03.481220

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1e7a2d9b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=True),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'labels',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('color', sa.String(), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_labels_id', 'labels', ['id'])
    op.create_index('ix_labels_user_id', 'labels', ['user_id'])

    op.create_table(
        'label_relations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('from_label_id', sa.Integer(), sa.ForeignKey('labels.id', ondelete='CASCADE'), nullable=False),
        sa.Column('to_label_id', sa.Integer(), sa.ForeignKey('labels.id', ondelete='CASCADE'), nullable=False),
        sa.Column('relation_type', sa.String(20), nullable=False),
        sa.CheckConstraint(
            "relation_type IN ('child_to_parent', 'parent_to_child')",
            name='ck_label_relations_relation_type',
        ),
        sa.CheckConstraint('from_label_id <> to_label_id', name='ck_label_relations_not_self'),
    )
    op.create_index('ix_label_relations_id', 'label_relations', ['id'])
    op.create_index('ix_label_relations_from_label_id', 'label_relations', ['from_label_id'])
    op.create_index('ix_label_relations_to_label_id', 'label_relations', ['to_label_id'])
    # Single parent per label, whichever way the row is encoded
    op.execute(
        "CREATE UNIQUE INDEX uq_label_relations_child_end ON label_relations "
        "((CASE WHEN relation_type = 'child_to_parent' THEN from_label_id ELSE to_label_id END))"
    )

    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('file_type', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_documents_id', 'documents', ['id'])
    op.create_index('ix_documents_user_id', 'documents', ['user_id'])

    op.create_table(
        'annotations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('start_offset', sa.Integer(), nullable=False),
        sa.Column('end_offset', sa.Integer(), nullable=False),
        sa.Column('selected_text', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('document_id', sa.Integer(), sa.ForeignKey('documents.id', ondelete='CASCADE'), nullable=False),
        sa.Column('label_id', sa.Integer(), sa.ForeignKey('labels.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
    )
    op.create_index('ix_annotations_id', 'annotations', ['id'])
    op.create_index('ix_annotations_document_id', 'annotations', ['document_id'])
    op.create_index('ix_annotations_label_id', 'annotations', ['label_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('annotations')
    op.drop_table('documents')
    op.execute('DROP INDEX uq_label_relations_child_end')
    op.drop_table('label_relations')
    op.drop_table('labels')
    op.drop_table('users')
