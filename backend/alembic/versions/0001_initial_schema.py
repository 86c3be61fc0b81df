"""initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        sa.CheckConstraint("type IN ('owner', 'vet')", name="ck_users_type"),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "partnered_vet_offices",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("detail_link", sa.String(), nullable=True),
        sa.Column("external_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_partnered_vet_offices"),
    )

    op.create_table(
        "pets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("species", sa.String(), nullable=False),
        sa.Column("breed", sa.String(), nullable=True),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("microchip_id", sa.String(), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("owner_name", sa.String(), nullable=True),
        sa.Column("owner_phone", sa.String(), nullable=True),
        sa.Column("owner_email", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], name="fk_pets_owner_id_users", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_pets"),
    )
    op.create_index("ix_pets_owner_id", "pets", ["owner_id"])

    op.create_table(
        "vet_patients",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("vet_id", sa.Uuid(), nullable=False),
        sa.Column("pet_id", sa.Uuid(), nullable=False),
        sa.Column("assigned_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("status IN ('active', 'inactive', 'discharged')", name="ck_vet_patients_status"),
        sa.ForeignKeyConstraint(["pet_id"], ["pets.id"], name="fk_vet_patients_pet_id_pets", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["vet_id"], ["users.id"], name="fk_vet_patients_vet_id_users", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_vet_patients"),
        sa.UniqueConstraint("vet_id", "pet_id", name="uq_vet_patients_vet_pet"),
    )
    op.create_index("ix_vet_patients_vet_id", "vet_patients", ["vet_id"])
    op.create_index("ix_vet_patients_pet_id", "vet_patients", ["pet_id"])

    op.create_table(
        "vet_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("pet_id", sa.Uuid(), nullable=False),
        sa.Column("vet_id", sa.Uuid(), nullable=False),
        sa.Column("visit_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("diagnosis", sa.String(), nullable=True),
        sa.Column("treatment", sa.String(), nullable=True),
        sa.Column("medications", sa.String(), nullable=True),
        sa.Column("next_visit_date", sa.Date(), nullable=True),
        sa.Column("office_location", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["pet_id"], ["pets.id"], name="fk_vet_records_pet_id_pets", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["vet_id"], ["users.id"], name="fk_vet_records_vet_id_users", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_vet_records"),
    )
    op.create_index("ix_vet_records_pet_id", "vet_records", ["pet_id"])
    op.create_index("ix_vet_records_vet_id", "vet_records", ["vet_id"])

    op.create_table(
        "preferred_vet_offices",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("vet_office_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_preferred_vet_offices_user_id_users", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["vet_office_id"],
            ["partnered_vet_offices.id"],
            name="fk_preferred_vet_offices_vet_office_id_partnered_vet_offices",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_preferred_vet_offices"),
        sa.UniqueConstraint("user_id", "vet_office_id", name="uq_preferred_vet_offices_user_office"),
    )
    op.create_index("ix_preferred_vet_offices_user_id", "preferred_vet_offices", ["user_id"])

    op.create_table(
        "vet_office_members",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("vet_user_id", sa.Uuid(), nullable=False),
        sa.Column("vet_office_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["vet_user_id"], ["users.id"], name="fk_vet_office_members_vet_user_id_users", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["vet_office_id"],
            ["partnered_vet_offices.id"],
            name="fk_vet_office_members_vet_office_id_partnered_vet_offices",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_vet_office_members"),
        sa.UniqueConstraint("vet_user_id", "vet_office_id", name="uq_vet_office_members_vet_office"),
    )
    op.create_index("ix_vet_office_members_vet_user_id", "vet_office_members", ["vet_user_id"])


def downgrade() -> None:
    op.drop_index("ix_vet_office_members_vet_user_id", table_name="vet_office_members")
    op.drop_table("vet_office_members")
    op.drop_index("ix_preferred_vet_offices_user_id", table_name="preferred_vet_offices")
    op.drop_table("preferred_vet_offices")
    op.drop_index("ix_vet_records_vet_id", table_name="vet_records")
    op.drop_index("ix_vet_records_pet_id", table_name="vet_records")
    op.drop_table("vet_records")
    op.drop_index("ix_vet_patients_pet_id", table_name="vet_patients")
    op.drop_index("ix_vet_patients_vet_id", table_name="vet_patients")
    op.drop_table("vet_patients")
    op.drop_index("ix_pets_owner_id", table_name="pets")
    op.drop_table("pets")
    op.drop_table("partnered_vet_offices")
    op.drop_table("users")
