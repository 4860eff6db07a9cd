"""Role policy: who may write which field group.

Every mutating entry point consults this table before touching state. For
leads, "owner" means the lead's assigned staff member. For clients, ownership
is per processing slot: fee fields and the handoff belong to the Stage 1
operator, milestones to the Stage 2 operator.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from leadflow.domain.errors import Forbidden
from leadflow.domain.value_objects.role import Role


class FieldGroup(str, Enum):
    """Groups of fields sharing one access rule."""

    ASSIGNMENT = "assignment"
    UNASSIGNMENT = "unassignment"
    WORKFLOW = "workflow"
    FOLLOW_UP_STATUS = "follow_up_status"
    PROFILE = "profile"
    FEE = "fee"
    PROCESSING_HANDOFF = "processing_handoff"
    MILESTONE = "milestone"


class _Rule(Enum):
    ALWAYS = "always"
    OWNER = "owner"
    NEVER = "never"


_ADMIN_RULES = {group: _Rule.ALWAYS for group in FieldGroup}

_STAFF_RULES = {
    FieldGroup.ASSIGNMENT: _Rule.OWNER,  # transfer only
    FieldGroup.UNASSIGNMENT: _Rule.NEVER,
    FieldGroup.WORKFLOW: _Rule.OWNER,
    FieldGroup.FOLLOW_UP_STATUS: _Rule.OWNER,
    FieldGroup.PROFILE: _Rule.OWNER,
    FieldGroup.FEE: _Rule.OWNER,
    FieldGroup.PROCESSING_HANDOFF: _Rule.OWNER,
    FieldGroup.MILESTONE: _Rule.OWNER,
}

_DENY_RULES = {group: _Rule.NEVER for group in FieldGroup}

_WRITE_MATRIX: dict[Role, dict[FieldGroup, _Rule]] = {
    Role.ADMIN: _ADMIN_RULES,
    Role.SALES_TEAM_HEAD: _STAFF_RULES,
    Role.SALES_TEAM: _STAFF_RULES,
    Role.STAFF: _STAFF_RULES,
    Role.PROCESSING: _STAFF_RULES,
    Role.HR: _DENY_RULES,
}

_LEAD_FIELD_GROUPS: dict[str, FieldGroup] = {
    "assigned_staff_id": FieldGroup.ASSIGNMENT,
    "status": FieldGroup.WORKFLOW,
    "priority": FieldGroup.WORKFLOW,
    "comment": FieldGroup.WORKFLOW,
    "follow_up_date": FieldGroup.WORKFLOW,
    "follow_up_status": FieldGroup.FOLLOW_UP_STATUS,
}

CLIENT_FEE_FIELDS = frozenset({"amount_paid", "fee_status", "payment_due_date"})

# Hidden from client reads unless can_view_payment_data() allows them
PAYMENT_FIELDS = frozenset({"amount_paid", "fee_status", "registration_fee_paid", "assigned_staff_id"})


def can_write(role: Role, field_group: FieldGroup, is_owner: bool) -> bool:
    """
    Decide whether a role may write a field group.

    Args:
        role: Requester role
        field_group: Group of the field being written
        is_owner: Whether the requester owns the record for this group

    Returns:
        True if the write is allowed
    """
    rule = _WRITE_MATRIX[role][field_group]
    if rule is _Rule.ALWAYS:
        return True
    if rule is _Rule.OWNER:
        return is_owner
    return False


def lead_field_group(field_name: str, value: Any) -> FieldGroup:
    """
    Map a lead field (and its new value) to its field group.

    Clearing the assignment is its own group because owners may transfer
    a lead but never unassign it.
    """
    if field_name == "assigned_staff_id" and value is None:
        return FieldGroup.UNASSIGNMENT
    return _LEAD_FIELD_GROUPS.get(field_name, FieldGroup.PROFILE)


def client_field_group(field_name: str) -> FieldGroup:
    """Map a client field to its field group."""
    if field_name in CLIENT_FEE_FIELDS:
        return FieldGroup.FEE
    return FieldGroup.PROFILE


def ensure_can_write(role: Role, fields: Iterable[tuple[str, FieldGroup, bool]]) -> None:
    """
    Check a whole patch at once.

    Args:
        role: Requester role
        fields: (field name, field group, is_owner) triples

    Raises:
        Forbidden: If any field is not writable; names every rejected field
    """
    denied = sorted(name for name, group, is_owner in fields if not can_write(role, group, is_owner))
    if denied:
        raise Forbidden(f"Role {role.value} may not change: {', '.join(denied)}")


def can_create_lead(role: Role) -> bool:
    """Every lead-management role may create leads."""
    return role is not Role.HR


def can_delete_lead(role: Role, is_owner: bool) -> bool:
    """Admins and the owning staff member may delete a lead."""
    if role is Role.HR:
        return False
    return role.is_admin or is_owner


def can_delete_client(role: Role) -> bool:
    """Only admins delete clients."""
    return role.is_admin


def can_read_records(role: Role) -> bool:
    """HR users have no access to leads or clients."""
    return role is not Role.HR


def can_view_payment_data(role: Role, is_processing_operator: bool) -> bool:
    """
    Decide whether payment fields of a client are visible.

    Args:
        role: Requester role
        is_processing_operator: Whether the requester operates Stage 1 or Stage 2

    Returns:
        True for admins, the processing team and slot operators
    """
    return role.is_admin or role is Role.PROCESSING or is_processing_operator
