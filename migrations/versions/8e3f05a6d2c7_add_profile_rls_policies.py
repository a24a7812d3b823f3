"""add_profile_rls_policies

Revision ID: 8e3f05a6d2c7
Revises: 4b1d7c2e9a10
Create Date: 2026-03-02 10:41:07.902114

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8e3f05a6d2c7"
down_revision: str | Sequence[str] | None = "4b1d7c2e9a10"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TABLES = ["profiles", "profile_notes", "profile_collaborators"]


def upgrade() -> None:
    """Add Row Level Security policies for the profile tables.

    The API applies the same rules per viewer in its repositories; these
    policies enforce them for direct Supabase client connections.
    """
    # --- Helpers to avoid RLS recursion between profiles and collaborators ---
    op.execute("""
        CREATE OR REPLACE FUNCTION get_user_collaborating_profile_ids(uid UUID)
        RETURNS SETOF UUID
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT profile_id FROM profile_collaborators WHERE user_id = uid;
        $$;
    """)
    op.execute("""
        CREATE OR REPLACE FUNCTION can_read_profile(pid UUID, uid UUID)
        RETURNS BOOLEAN
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT EXISTS (
                SELECT 1 FROM profiles p
                WHERE p.id = pid
                AND (
                    p.visibility = 'public'
                    OR p.owner_id = uid
                    OR p.id IN (SELECT get_user_collaborating_profile_ids(uid))
                )
            );
        $$;
    """)
    op.execute("""
        CREATE OR REPLACE FUNCTION get_user_owned_profile_ids(uid UUID)
        RETURNS SETOF UUID
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT id FROM profiles WHERE owner_id = uid;
        $$;
    """)

    for table in TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles policies ---
    # SELECT: owner, collaborator, or public
    op.execute("""
        CREATE POLICY profile_select ON profiles
            FOR SELECT USING (
                can_read_profile(id, (SELECT auth.uid()))
            );
    """)
    # INSERT: only as owner
    op.execute("""
        CREATE POLICY profile_insert ON profiles
            FOR INSERT WITH CHECK (
                owner_id = (SELECT auth.uid())
            );
    """)
    # UPDATE: anyone who can read (counters); detail edits are owner-only in the API
    op.execute("""
        CREATE POLICY profile_update ON profiles
            FOR UPDATE USING (
                can_read_profile(id, (SELECT auth.uid()))
            );
    """)
    # DELETE: owner only
    op.execute("""
        CREATE POLICY profile_delete ON profiles
            FOR DELETE USING (
                owner_id = (SELECT auth.uid())
            );
    """)

    # --- Notes policies ---
    op.execute("""
        CREATE POLICY note_select ON profile_notes
            FOR SELECT USING (
                can_read_profile(profile_id, (SELECT auth.uid()))
            );
    """)
    op.execute("""
        CREATE POLICY note_insert ON profile_notes
            FOR INSERT WITH CHECK (
                user_id = (SELECT auth.uid())
                AND can_read_profile(profile_id, (SELECT auth.uid()))
            );
    """)
    op.execute("""
        CREATE POLICY note_delete ON profile_notes
            FOR DELETE USING (
                user_id = (SELECT auth.uid())
            );
    """)

    # --- Collaborators policies ---
    op.execute("""
        CREATE POLICY collaborator_select ON profile_collaborators
            FOR SELECT USING (
                user_id = (SELECT auth.uid())
                OR profile_id IN (SELECT get_user_owned_profile_ids((SELECT auth.uid())))
            );
    """)
    # INSERT: self-enrollment on public profiles only
    op.execute("""
        CREATE POLICY collaborator_insert ON profile_collaborators
            FOR INSERT WITH CHECK (
                user_id = (SELECT auth.uid())
                AND EXISTS (
                    SELECT 1 FROM profiles p
                    WHERE p.id = profile_id AND p.visibility = 'public'
                )
            );
    """)
    op.execute("""
        CREATE POLICY collaborator_delete ON profile_collaborators
            FOR DELETE USING (
                user_id = (SELECT auth.uid())
                OR profile_id IN (SELECT get_user_owned_profile_ids((SELECT auth.uid())))
            );
    """)


def downgrade() -> None:
    """Remove the profile RLS policies and helper functions."""
    for policy, table in [
        ("collaborator_delete", "profile_collaborators"),
        ("collaborator_insert", "profile_collaborators"),
        ("collaborator_select", "profile_collaborators"),
        ("note_delete", "profile_notes"),
        ("note_insert", "profile_notes"),
        ("note_select", "profile_notes"),
        ("profile_delete", "profiles"),
        ("profile_update", "profiles"),
        ("profile_insert", "profiles"),
        ("profile_select", "profiles"),
    ]:
        op.execute(f"DROP POLICY IF EXISTS {policy} ON {table};")

    for table in TABLES:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.execute("DROP FUNCTION IF EXISTS get_user_owned_profile_ids(UUID);")
    op.execute("DROP FUNCTION IF EXISTS can_read_profile(UUID, UUID);")
    op.execute("DROP FUNCTION IF EXISTS get_user_collaborating_profile_ids(UUID);")
