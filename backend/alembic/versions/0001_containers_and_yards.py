"""Create containers and yards tables.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa


def upgrade() -> None:
    op.create_table(
        "yards",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(500)),
        sa.Column("contact", sa.String(255)),
        sa.Column("notes", sa.Text),
    )

    op.create_table(
        "containers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("case_number", sa.String(100), nullable=False),
        sa.Column("container_number", sa.String(50)),
        sa.Column("mbl_number", sa.String(100)),
        sa.Column("size", sa.String(50)),
        sa.Column("terminal", sa.String(255)),
        sa.Column("weight", sa.String(50)),
        sa.Column("delivery_address_company", sa.Text),
        sa.Column("billing_party", sa.String(255)),
        sa.Column("demurrage", sa.String(255)),
        sa.Column("input_person", sa.String(255)),
        sa.Column("lfd", sa.String(100)),
        sa.Column("eta", sa.String(100)),
        sa.Column("appointment_time", sa.String(100)),
        sa.Column("delivery_appointment", sa.String(100)),
        sa.Column("empty_status", sa.String(255)),
        sa.Column("rt_loc_empty_app", sa.String(255)),
        sa.Column("yards", sa.String(255)),
        sa.Column("pu_driver", sa.String(255)),
        sa.Column("driver_id", sa.String(100)),
        sa.Column("chassis_id", sa.String(100)),
        sa.Column("notes", sa.Text),
        sa.Column("status", sa.String(40), nullable=False, server_default="AT_TERMINAL"),
        # No FK: yard_id is a soft reference that may outlive its yard
        sa.Column("yard_id", sa.String(36)),
        sa.Column("yard_status", sa.String(10)),
        sa.Column("order_index", sa.Float),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_containers_case_number", "containers", ["case_number"], unique=True)
    op.create_index("ix_containers_status", "containers", ["status"])
    op.create_index("ix_containers_yard_id", "containers", ["yard_id"])


def downgrade() -> None:
    op.drop_index("ix_containers_yard_id", table_name="containers")
    op.drop_index("ix_containers_status", table_name="containers")
    op.drop_index("ix_containers_case_number", table_name="containers")
    op.drop_table("containers")
    op.drop_table("yards")
