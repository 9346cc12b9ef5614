"""initial tables

Revision ID: 0001_initial_tables
Revises:
Create Date: 2024-01-08 10:00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial_tables"
down_revision = None
branch_labels = None
depends_on = None

slot_enum = sa.Enum("AP1", "AP2", name="slot")
storage_type_enum = sa.Enum("BULK", "PALLET", name="storagetype")
# Second use of the type: PostgreSQL already has it from storage_positions
storage_type_enum_existing = storage_type_enum.with_variant(
    postgresql.ENUM("BULK", "PALLET", name="storagetype", create_type=False), "postgresql"
)
kanban_stage_enum = sa.Enum("GREEN", "YELLOW", "RED", name="kanbanstage")
movement_type_enum = sa.Enum(
    "ENTRY", "EXIT", "EDIT", "KANBAN_ADD", "KANBAN_MOVE", "KANBAN_EXPEDITE",
    name="movementtype"
)


def upgrade() -> None:
    op.create_table(
        "storage_positions",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("block", sa.Integer(), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("slot", slot_enum, nullable=False),
        sa.Column("product_name", sa.String(length=255), nullable=True),
        sa.Column("product_code", sa.String(length=255), nullable=True),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("storage_type", storage_type_enum, nullable=True),
        sa.Column("entry_date", sa.Date(), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_empty", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_storage_positions_id"), "storage_positions", ["id"])
    op.create_index(op.f("ix_storage_positions_block"), "storage_positions", ["block"])
    op.create_index(op.f("ix_storage_positions_product_code"), "storage_positions", ["product_code"])

    op.create_table(
        "kanban_pallets",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("stage", kanban_stage_enum, nullable=False),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("product_code", sa.String(length=255), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("storage_type", storage_type_enum_existing, nullable=True),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_kanban_pallets_id"), "kanban_pallets", ["id"])
    op.create_index(op.f("ix_kanban_pallets_stage"), "kanban_pallets", ["stage"])
    op.create_index(op.f("ix_kanban_pallets_product_code"), "kanban_pallets", ["product_code"])

    op.create_table(
        "movement_history",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("movement_type", movement_type_enum, nullable=False),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("product_code", sa.String(length=255), nullable=False),
        sa.Column("client_name", sa.String(length=255), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("previous_location", sa.String(length=255), nullable=True),
        sa.Column("details", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_movement_history_id"), "movement_history", ["id"])
    op.create_index(op.f("ix_movement_history_timestamp"), "movement_history", ["timestamp"])
    op.create_index(op.f("ix_movement_history_movement_type"), "movement_history", ["movement_type"])
    op.create_index(op.f("ix_movement_history_product_name"), "movement_history", ["product_name"])
    op.create_index(op.f("ix_movement_history_product_code"), "movement_history", ["product_code"])


def downgrade() -> None:
    op.drop_table("movement_history")
    op.drop_table("kanban_pallets")
    op.drop_table("storage_positions")
    bind = op.get_bind()
    for enum_type in (movement_type_enum, kanban_stage_enum, storage_type_enum, slot_enum):
        enum_type.drop(bind, checkfirst=True)
