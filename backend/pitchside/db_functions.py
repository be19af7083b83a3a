"""
Database-side promotion procedure (PostgreSQL only).

manual_promote_waitlist(p_tournament_id) locks the tournament row, picks the
lowest main slot number with no row and the earliest waitlisted registrant,
and moves that registrant in the same transaction. It returns exactly one row:

    success, promoted_slot_id, promoted_player_id,
    from_slot_number, new_slot_number, message

Other dialects have no stored procedures; the promotion service detects the
missing function and runs its fallback path instead.
"""
from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

PROMOTE_WAITLIST_FUNCTION_SQL = """
CREATE OR REPLACE FUNCTION manual_promote_waitlist(p_tournament_id integer)
RETURNS TABLE (
    success boolean,
    promoted_slot_id integer,
    promoted_player_id integer,
    from_slot_number integer,
    new_slot_number integer,
    message text
)
LANGUAGE plpgsql
AS $$
DECLARE
    v_total_slots integer;
    v_available integer;
    v_slot_id integer;
    v_player_id integer;
    v_from_slot integer;
BEGIN
    SELECT t.total_slots INTO v_total_slots
    FROM tournaments t
    WHERE t.id = p_tournament_id
    FOR UPDATE;

    IF NOT FOUND THEN
        RETURN QUERY SELECT false, NULL::integer, NULL::integer, NULL::integer, NULL::integer,
            'Tournament not found'::text;
        RETURN;
    END IF;

    SELECT MIN(n) INTO v_available
    FROM generate_series(1, v_total_slots) AS n
    WHERE NOT EXISTS (
        SELECT 1 FROM tournament_slots s
        WHERE s.tournament_id = p_tournament_id AND s.slot_number = n
    );

    IF v_available IS NULL THEN
        RETURN QUERY SELECT false, NULL::integer, NULL::integer, NULL::integer, NULL::integer,
            'No available main slots'::text;
        RETURN;
    END IF;

    SELECT s.id, s.player_id, s.slot_number INTO v_slot_id, v_player_id, v_from_slot
    FROM tournament_slots s
    WHERE s.tournament_id = p_tournament_id
      AND s.slot_number > v_total_slots
      AND s.status = 'waitlist'
      AND s.player_id IS NOT NULL
    ORDER BY s.requested_at ASC, s.id ASC
    LIMIT 1
    FOR UPDATE;

    IF NOT FOUND THEN
        RETURN QUERY SELECT false, NULL::integer, NULL::integer, NULL::integer, NULL::integer,
            'No waitlist players to promote'::text;
        RETURN;
    END IF;

    UPDATE tournament_slots
    SET slot_number = v_available, status = 'pending', updated_at = now()
    WHERE id = v_slot_id;

    RETURN QUERY SELECT true, v_slot_id, v_player_id, v_from_slot,
        v_available, 'Waitlist player promoted successfully'::text;
END;
$$;
"""


def _is_postgres(engine: Engine) -> bool:
    return engine.dialect.name.lower() in ("postgresql", "postgres")


def ensure_promotion_procedure(engine: Engine) -> bool:
    """
    Idempotently install manual_promote_waitlist() on PostgreSQL.
    Safe to run at every startup. Returns True when installed.
    """
    if not _is_postgres(engine):
        logger.info("Dialect %s has no stored procedures; promotion uses the fallback path", engine.dialect.name)
        return False

    with engine.begin() as conn:
        conn.execute(text(PROMOTE_WAITLIST_FUNCTION_SQL))
    logger.info("Installed promotion procedure manual_promote_waitlist()")
    return True
