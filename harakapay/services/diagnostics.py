"""Backend probes used by ``scripts/probe_backend.py``.

These talk to the backend directly with the anonymous key to check that the
tables, row-level-security policies and the signup trigger the gateway relies
on are in place. They are operational tools and are not used by the API.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from harakapay.clients.supabase import AuthSession, SupabaseClient
from harakapay.repositories.errors import PERMISSION_DENIED_CODE
from harakapay.services.accounts import signup_user_id

logger = logging.getLogger(__name__)

SIGNUP_TRIGGER = "on_auth_user_created"
SIGNUP_FUNCTION = "handle_new_user"


@dataclass
class ProbeResult:
    name: str
    passed: bool
    message: str
    data: Any = None
    warnings: list[str] = field(default_factory=list)


def probe_table(client: SupabaseClient, table: str) -> ProbeResult:
    result = client.select(table, "*", limit=1)
    if not result.ok:
        return ProbeResult(f"select:{table}", False, f"SELECT failed: {result.error.message}")
    rows = result.data or []
    return ProbeResult(f"select:{table}", True, f"SELECT works, found {len(rows)} record(s)", data=rows)


def probe_table_columns(client: SupabaseClient, table: str) -> ProbeResult:
    result = client.select(
        "information_schema.columns",
        "column_name, data_type, is_nullable, column_default",
        filters={"table_name": table, "table_schema": "public"},
    )
    if not result.ok:
        # Metadata schemas are usually not exposed over REST
        return ProbeResult(f"columns:{table}", True, "Could not read table structure", warnings=[result.error.message])
    columns = result.data or []
    return ProbeResult(f"columns:{table}", True, f"{len(columns)} column(s)", data=columns)


def probe_rls(client: SupabaseClient, table: str = "parents") -> ProbeResult:
    """An anonymous insert into ``table`` must be rejected by a policy.

    Only a permission failure counts; any other error (a bad column, a type
    mismatch) says nothing about row-level security.
    """
    warnings = []
    policies = client.select("pg_policies", "*", filters={"tablename": table})
    if not policies.ok:
        warnings.append(f"Could not check policies: {policies.error.message}")

    attempt = client.insert(
        table,
        {
            "user_id": str(uuid.uuid4()),
            "first_name": "Probe",
            "last_name": "User",
            "phone": "243000000000",
            "email": "probe@example.com",
        },
    )
    if attempt.ok:
        rows = attempt.data or []
        for row in rows if isinstance(rows, list) else [rows]:
            if row.get("id"):
                client.delete(table, {"id": row["id"]})
        return ProbeResult(f"rls:{table}", False, "Anonymous insert succeeded; RLS is not blocking writes", warnings=warnings)
    error = attempt.error
    if error.code != PERMISSION_DENIED_CODE and error.status not in (401, 403):
        return ProbeResult(
            f"rls:{table}",
            False,
            f"Insert failed for a reason other than RLS ({error.code}): {error.message}",
            warnings=warnings,
        )
    return ProbeResult(
        f"rls:{table}",
        True,
        f"Anonymous insert blocked: {error.message}",
        data=policies.data if policies.ok else None,
        warnings=warnings,
    )


def probe_signup_trigger(client: SupabaseClient, wait_seconds: float = 2.0, sleep=time.sleep) -> ProbeResult:
    """Sign up a throwaway user and check the trigger created its parent row."""
    warnings = []
    triggers = client.select(
        "information_schema.triggers",
        "*",
        filters={"trigger_name": SIGNUP_TRIGGER, "event_object_table": "users"},
    )
    if not triggers.ok:
        warnings.append(f"Could not check triggers: {triggers.error.message}")
    elif not triggers.data:
        warnings.append(f"Trigger {SIGNUP_TRIGGER} not found")

    functions = client.select(
        "information_schema.routines",
        "*",
        filters={"routine_name": SIGNUP_FUNCTION, "routine_schema": "public"},
    )
    if not functions.ok:
        warnings.append(f"Could not check functions: {functions.error.message}")
    elif not functions.data:
        warnings.append(f"Function {SIGNUP_FUNCTION} not found")

    email = f"test-{int(time.time() * 1000)}@example.com"
    signup = client.sign_up(
        email,
        "testpassword123",
        {"first_name": "Test", "last_name": "User", "phone": "243000000000"},
    )
    if not signup.ok:
        return ProbeResult("signup-trigger", False, f"Signup failed: {signup.error.message}", warnings=warnings)
    user_id = signup_user_id(signup.data)
    if not user_id:
        return ProbeResult("signup-trigger", False, "Signup returned no user id", warnings=warnings)
    logger.info("Probe signup created user %s", user_id)

    sleep(wait_seconds)
    reader = client.with_token(signup.data.access_token) if isinstance(signup.data, AuthSession) else client
    parent = reader.select("parents", "*", filters={"user_id": user_id}, single=True)
    if not parent.ok:
        return ProbeResult(
            "signup-trigger", False, f"Parent profile not created: {parent.error.message}", warnings=warnings
        )
    return ProbeResult("signup-trigger", True, "Parent profile created by trigger", data=parent.data, warnings=warnings)
