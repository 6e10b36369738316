"""Initial ledger tables

Revision ID: 20261019_initial_ledger
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_initial_ledger"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), onupdate=sa.func.now(), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Partners first: users and items point at them
    op.create_table(
        "partners",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("participation", sa.DECIMAL(5, 2), nullable=False, server_default="0"),
        sa.Column("color", sa.String(20)),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_house", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    op.create_table(
        "partner_movements",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("partner_id", sa.String(40), sa.ForeignKey("partners.id"), nullable=False),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("movement_date", sa.Date, nullable=False),
        sa.Column("movement_type", sa.String(20), nullable=False),
        sa.Column("amount", sa.DECIMAL(15, 2), nullable=False),
        sa.Column("concept", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )
    op.create_index("ix_partner_movements_partner_id", "partner_movements", ["partner_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("name", sa.String(255)),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.Enum("DIRECTOR", "OPERATOR", "INVESTOR", "PENDING", name="userrole"), nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("partner_id", sa.String(40), sa.ForeignKey("partners.id")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    # Catalog
    op.create_table(
        "brands",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("country", sa.String(100)),
        sa.Column("founded", sa.Integer),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    op.create_table(
        "watch_models",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("brand_id", sa.String(40), sa.ForeignKey("brands.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("family", sa.String(100)),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    op.create_table(
        "watch_references",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("model_id", sa.String(40), sa.ForeignKey("watch_models.id"), nullable=False),
        sa.Column("ref", sa.String(100), nullable=False),
        sa.Column("caliber", sa.String(100)),
        sa.Column("material", sa.String(100)),
        sa.Column("bezel", sa.String(100)),
        sa.Column("dial", sa.String(100)),
        sa.Column("size", sa.String(20)),
        sa.Column("bracelet", sa.String(100)),
        sa.Column("year", sa.Integer),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    op.create_table(
        "cost_types",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("icon", sa.String(10)),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    # Contacts
    op.create_table(
        "clients",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(30)),
        sa.Column("email", sa.String(255)),
        sa.Column("city", sa.String(100)),
        sa.Column("tier", sa.String(20), nullable=False, server_default="Prospect"),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    op.create_table(
        "suppliers",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("supplier_type", sa.String(50), server_default="Private"),
        sa.Column("phone", sa.String(30)),
        sa.Column("email", sa.String(255)),
        sa.Column("city", sa.String(100)),
        sa.Column("rating", sa.Integer, nullable=False, server_default="3"),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    # Inventory and its cost ledger
    op.create_table(
        "inventory_items",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("reference_id", sa.String(40), sa.ForeignKey("watch_references.id")),
        sa.Column("supplier_id", sa.String(40), sa.ForeignKey("suppliers.id")),
        sa.Column("serial", sa.String(100)),
        sa.Column("condition", sa.String(50)),
        sa.Column("full_set", sa.String(10), nullable=False, server_default="unknown"),
        sa.Column("papers", sa.String(10), nullable=False, server_default="unknown"),
        sa.Column("box", sa.String(10), nullable=False, server_default="unknown"),
        sa.Column("cost", sa.DECIMAL(15, 2), nullable=False, server_default="0"),
        sa.Column("price_asked", sa.DECIMAL(15, 2)),
        sa.Column("stage", sa.String(20), nullable=False, server_default="opportunity"),
        sa.Column("status", sa.String(20), nullable=False, server_default="Opportunity"),
        sa.Column("acquisition_mode", sa.String(20), nullable=False, server_default="partnership"),
        sa.Column("contributing_partner_id", sa.String(40), sa.ForeignKey("partners.id")),
        sa.Column("custom_split", sa.JSON),
        sa.Column("entry_date", sa.Date),
        sa.Column("validated_by", sa.String(255)),
        sa.Column("validation_date", sa.Date),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )
    op.create_index("ix_inventory_items_stage", "inventory_items", ["stage"])

    op.create_table(
        "additional_costs",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("item_id", sa.String(40), sa.ForeignKey("inventory_items.id"), nullable=False),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("cost_type", sa.String(100), nullable=False),
        sa.Column("cost_date", sa.Date),
        sa.Column("amount", sa.DECIMAL(15, 2), nullable=False),
        sa.Column("description", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )
    op.create_index("ix_additional_costs_item_id", "additional_costs", ["item_id"])

    # Sales and their payments
    op.create_table(
        "sales",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("watch_id", sa.String(40), sa.ForeignKey("inventory_items.id"), nullable=False, unique=True),
        sa.Column("client_id", sa.String(40), sa.ForeignKey("clients.id")),
        sa.Column("sale_date", sa.Date, nullable=False),
        sa.Column("agreed_price", sa.DECIMAL(15, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="Pending"),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )

    op.create_table(
        "sale_payments",
        sa.Column("id", sa.String(40), nullable=False),
        sa.Column("sale_id", sa.String(40), sa.ForeignKey("sales.id"), nullable=False),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("payment_date", sa.Date, nullable=False),
        sa.Column("amount", sa.DECIMAL(15, 2), nullable=False),
        sa.Column("method", sa.String(50), nullable=False),
        sa.Column("notes", sa.Text),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id")
    )
    op.create_index("ix_sale_payments_sale_id", "sale_payments", ["sale_id"])


def downgrade() -> None:
    op.drop_index("ix_sale_payments_sale_id", table_name="sale_payments")
    op.drop_table("sale_payments")
    op.drop_table("sales")
    op.drop_index("ix_additional_costs_item_id", table_name="additional_costs")
    op.drop_table("additional_costs")
    op.drop_index("ix_inventory_items_stage", table_name="inventory_items")
    op.drop_table("inventory_items")
    op.drop_table("suppliers")
    op.drop_table("clients")
    op.drop_table("cost_types")
    op.drop_table("watch_references")
    op.drop_table("watch_models")
    op.drop_table("brands")
    op.drop_table("users")
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=True)
    op.drop_index("ix_partner_movements_partner_id", table_name="partner_movements")
    op.drop_table("partner_movements")
    op.drop_table("partners")
