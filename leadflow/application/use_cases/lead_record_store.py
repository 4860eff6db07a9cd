"""Lead record store use case."""

from collections.abc import Sequence
from typing import Any, Optional

from leadflow.application.dtos.filters import RecordFilter
from leadflow.application.dtos.lead import BulkAssignResult, LeadCreate, LeadPatch
from leadflow.application.dtos.notification import Notification, NotificationType
from leadflow.application.dtos.requester import Requester
from leadflow.application.ports.lead_comment_repository import LeadCommentRepository
from leadflow.application.ports.lead_repository import LeadRepository
from leadflow.application.ports.notification_emitter import NotificationEmitter
from leadflow.application.use_cases.notify import notify_best_effort
from leadflow.domain.entities.lead import Lead
from leadflow.domain.entities.lead_comment import LeadComment
from leadflow.domain.errors import Forbidden, NotFound, ValidationError
from leadflow.domain.policies.role_policy import (
    can_create_lead,
    can_delete_lead,
    can_read_records,
    ensure_can_write,
    lead_field_group,
)
from leadflow.domain.value_objects.lead_status import FollowUpStatus, LeadStatus
from leadflow.infrastructure.logging.logger import log_event, log_lead_transition

# Columns a patch may change but never clear
REQUIRED_LEAD_FIELDS = ("name", "phone_number", "phone_country_code")


class LeadRecordStore:
    """Use case for creating, reading and mutating leads."""

    def __init__(
        self,
        lead_repository: LeadRepository,
        comment_repository: LeadCommentRepository,
        notification_emitter: NotificationEmitter,
        default_country_code: str = "+91",
    ) -> None:
        """
        Initialize lead record store.

        Args:
            lead_repository: Repository holding leads
            comment_repository: Repository holding lead comment threads
            notification_emitter: Emitter for assignment notifications
            default_country_code: Country code applied to phone numbers without one
        """
        self._lead_repository = lead_repository
        self._comment_repository = comment_repository
        self._notification_emitter = notification_emitter
        self._default_country_code = default_country_code

    async def create(self, fields: LeadCreate, requester: Requester) -> Lead:
        """
        Create a lead.

        Non-admin creators always own the lead they create.

        Args:
            fields: Lead fields
            requester: Authenticated user

        Returns:
            Stored lead

        Raises:
            Forbidden: If the role cannot manage leads or assigns to someone else
            ValidationError: On duplicate contact details or inconsistent status
        """
        if not can_create_lead(requester.role):
            raise Forbidden(f"Role {requester.role.value} cannot create leads")

        assigned_staff_id = fields.assigned_staff_id
        if not requester.role.is_admin:
            if assigned_staff_id is not None and assigned_staff_id != requester.id:
                raise Forbidden("Only admins can create leads assigned to another user")
            assigned_staff_id = requester.id

        status = fields.status or LeadStatus.UNASSIGNED
        if status.is_terminal:
            raise ValidationError("Leads reach Registration Completed only through registration")
        if assigned_staff_id is None and status is not LeadStatus.UNASSIGNED:
            raise ValidationError(f"An unassigned lead cannot have status {status.value}")

        duplicate = await self._lead_repository.find_duplicate(fields.phone_number, fields.email)
        if duplicate is not None:
            raise ValidationError("Lead with this phone number or email already exists")

        values = fields.model_dump(exclude={"status", "assigned_staff_id", "follow_up_status"})
        values["phone_country_code"] = fields.phone_country_code or self._default_country_code
        lead = Lead(
            **values,
            status=status,
            assigned_staff_id=assigned_staff_id,
            follow_up_status=fields.follow_up_status or FollowUpStatus.PENDING,
            created_by=requester.id,
        )
        lead.normalize_assignment()

        stored = await self._lead_repository.add(lead)
        log_event(
            component="leads",
            event="lead_created",
            lead_id=stored.id,
            requester_id=requester.id,
            status=stored.status.value,
            assigned_staff_id=stored.assigned_staff_id,
        )

        if stored.assigned_staff_id is not None and stored.assigned_staff_id != requester.id:
            await self._notify_assignment(stored, requester)
        return stored

    async def get(self, lead_id: int, requester: Requester) -> Lead:
        """
        Get a lead visible to the requester.

        Args:
            lead_id: Lead identifier
            requester: Authenticated user

        Returns:
            Lead entity

        Raises:
            NotFound: If the lead does not exist
            Forbidden: If a non-admin does not own the lead
        """
        if not can_read_records(requester.role):
            raise Forbidden(f"Role {requester.role.value} cannot read leads")
        lead = await self._lead_repository.get(lead_id)
        if lead is None:
            raise NotFound(f"Lead {lead_id} not found")
        if not requester.role.is_admin and not lead.is_owned_by(requester.id):
            raise Forbidden("You can only view leads assigned to you")
        return lead

    async def list(self, record_filter: RecordFilter, requester: Requester) -> list[Lead]:
        """
        List leads visible to the requester.

        Non-admins only see their own leads. Converted leads are archival and
        only listed when the filter asks for Registration Completed.

        Args:
            record_filter: Filter criteria
            requester: Authenticated user

        Returns:
            Matching leads
        """
        if not can_read_records(requester.role):
            raise Forbidden(f"Role {requester.role.value} cannot read leads")
        if not requester.role.is_admin:
            record_filter = record_filter.model_copy(update={"assigned_staff_id": requester.id})

        leads = await self._lead_repository.list(record_filter)
        if record_filter.status == LeadStatus.REGISTRATION_COMPLETED.value:
            return leads
        return [lead for lead in leads if not lead.is_converted()]

    async def update(self, lead_id: int, patch: LeadPatch, requester: Requester) -> Lead:
        """
        Apply a patch to a lead, all or nothing.

        Args:
            lead_id: Lead identifier
            patch: Fields to change
            requester: Authenticated user

        Returns:
            Updated lead

        Raises:
            NotFound: If the lead does not exist
            Forbidden: If any field of the patch is not writable by the requester
            ValidationError: If the lead is converted or the patch breaks an invariant
        """
        updated, _ = await self._apply_patch(lead_id, patch.changes(), requester)
        return updated

    async def delete(self, lead_id: int, requester: Requester) -> None:
        """
        Delete a lead. Clients created from it keep their lead_id.

        Args:
            lead_id: Lead identifier
            requester: Authenticated user

        Raises:
            NotFound: If the lead does not exist
            Forbidden: If the requester is neither admin nor owner
        """
        lead = await self._lead_repository.get(lead_id)
        if lead is None:
            raise NotFound(f"Lead {lead_id} not found")
        if not can_delete_lead(requester.role, lead.is_owned_by(requester.id)):
            raise Forbidden("Only admins or the assigned staff member can delete a lead")

        if not await self._lead_repository.delete(lead_id):
            raise NotFound(f"Lead {lead_id} not found")
        log_event(component="leads", event="lead_deleted", lead_id=lead_id, requester_id=requester.id)

    async def add_comment(self, lead_id: int, text: str, requester: Requester) -> LeadComment:
        """
        Append a comment to a lead's thread.

        Args:
            lead_id: Lead identifier
            text: Comment text, stored stripped
            requester: Authenticated user (owner or admin)

        Returns:
            Stored comment

        Raises:
            ValidationError: If the text is blank or the lead is converted
            NotFound: If the lead does not exist
            Forbidden: If a non-admin does not own the lead
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError("Comment text is required")

        lead = await self.get(lead_id, requester)
        if lead.is_converted():
            raise ValidationError(f"Lead {lead_id} has been converted and is read-only")

        comment = await self._comment_repository.add(
            LeadComment(lead_id=lead_id, author_id=requester.id, text=text)
        )
        log_event(
            component="leads",
            event="lead_comment_added",
            lead_id=lead_id,
            comment_id=comment.id,
            requester_id=requester.id,
        )
        return comment

    async def list_comments(self, lead_id: int, requester: Requester) -> Sequence[LeadComment]:
        """
        Get a lead's comment thread, oldest first.

        Args:
            lead_id: Lead identifier
            requester: Authenticated user (owner or admin)

        Returns:
            Comments in the order they were added

        Raises:
            NotFound: If the lead does not exist
            Forbidden: If a non-admin does not own the lead
        """
        await self.get(lead_id, requester)
        return await self._comment_repository.list_for_lead(lead_id)

    async def bulk_assign(
        self, lead_ids: Sequence[int], staff_id: int, requester: Requester
    ) -> BulkAssignResult:
        """
        Assign several leads to one staff member.

        Each lead is updated atomically on its own; one rejected lead does not
        stop the others.

        Args:
            lead_ids: Leads to assign
            staff_id: New assignee
            requester: Authenticated user

        Returns:
            Per-lead outcome summary
        """
        updated: list[int] = []
        unchanged: list[int] = []
        not_found: list[int] = []
        rejected: list[int] = []
        changes = {"assigned_staff_id": staff_id}

        for lead_id in dict.fromkeys(lead_ids):
            try:
                _, changed = await self._apply_patch(lead_id, changes, requester, skip_if_unchanged=True)
            except NotFound:
                not_found.append(lead_id)
            except (Forbidden, ValidationError):
                rejected.append(lead_id)
            else:
                (updated if changed else unchanged).append(lead_id)

        log_event(
            component="leads",
            event="bulk_assign",
            requester_id=requester.id,
            staff_id=staff_id,
            updated=len(updated),
            unchanged=len(unchanged),
            not_found=len(not_found),
            rejected=len(rejected),
        )
        return BulkAssignResult(
            updated_lead_ids=updated,
            unchanged_lead_ids=unchanged,
            not_found_lead_ids=not_found,
            rejected_lead_ids=rejected,
        )

    async def normalize_assignments(self, requester: Requester) -> int:
        """
        Repair leads whose status disagrees with their assignment.

        Args:
            requester: Authenticated user (admin only)

        Returns:
            Number of repaired leads
        """
        if not requester.role.is_admin:
            raise Forbidden("Only admins can normalize lead assignments")
        repaired = await self._lead_repository.normalize_assignments()
        log_event(
            component="leads",
            event="assignments_normalized",
            requester_id=requester.id,
            repaired=repaired,
        )
        return repaired

    async def _apply_patch(
        self,
        lead_id: int,
        changes: dict[str, Any],
        requester: Requester,
        skip_if_unchanged: bool = False,
    ) -> tuple[Lead, bool]:
        """
        Write patch values to a lead under the repository lock.

        Args:
            lead_id: Lead identifier
            changes: Field values to write
            requester: Authenticated user
            skip_if_unchanged: Leave the lead untouched when it already holds every value

        Returns:
            Lead as stored and whether it was written
        """
        for name in REQUIRED_LEAD_FIELDS:
            if name in changes and changes[name] is None:
                raise ValidationError(f"{name} cannot be cleared")
        before: dict[str, Any] = {}

        def mutate(lead: Lead) -> Optional[Lead]:
            if lead.is_converted():
                raise ValidationError(f"Lead {lead_id} has been converted and is read-only")

            is_owner = lead.is_owned_by(requester.id)
            ensure_can_write(
                requester.role,
                ((name, lead_field_group(name, value), is_owner) for name, value in changes.items()),
            )
            if not changes:
                return None
            if skip_if_unchanged and all(getattr(lead, name) == value for name, value in changes.items()):
                return None

            before["status"] = lead.status
            before["assigned_staff_id"] = lead.assigned_staff_id
            _apply_lead_changes(lead, changes)
            lead.touch()
            return lead

        updated = await self._lead_repository.update(lead_id, mutate)
        if not before:
            return updated, False

        log_lead_transition(
            lead_id=lead_id,
            requester_id=requester.id,
            status_before=before["status"].value,
            status_after=updated.status.value,
            fields=sorted(changes),
        )
        if (
            updated.assigned_staff_id is not None
            and updated.assigned_staff_id != before["assigned_staff_id"]
        ):
            await self._notify_assignment(updated, requester)
        return updated, True

    async def _notify_assignment(self, lead: Lead, requester: Requester) -> None:
        await notify_best_effort(
            self._notification_emitter,
            Notification(
                type=NotificationType.LEAD_ASSIGNED,
                user_id=lead.assigned_staff_id,
                lead_id=lead.id,
                message=f'Lead "{lead.name}" has been assigned to you',
                created_by=requester.id,
            ),
        )


def _apply_lead_changes(lead: Lead, changes: dict[str, Any]) -> None:
    """
    Apply patch values and the derived-field rules to a lead.

    Raises:
        ValidationError: If the result would break the assignment invariant
    """
    new_status = changes.get("status")
    if new_status is not None and new_status.is_terminal:
        raise ValidationError("Use complete-registration to convert a lead into a client")

    had_follow_up_date = lead.follow_up_date is not None
    for name, value in changes.items():
        if name in ("status", "follow_up_status") and value is None:
            raise ValidationError(f"{name} cannot be cleared")
        setattr(lead, name, value)

    # A newly introduced follow-up date starts a new follow-up
    if (
        changes.get("follow_up_date") is not None
        and not had_follow_up_date
        and "follow_up_status" not in changes
    ):
        lead.follow_up_status = FollowUpStatus.PENDING

    if lead.assigned_staff_id is None:
        if new_status is not None and new_status is not LeadStatus.UNASSIGNED:
            raise ValidationError(f"An unassigned lead cannot have status {new_status.value}")
        lead.status = LeadStatus.UNASSIGNED
    elif lead.status is LeadStatus.UNASSIGNED:
        if new_status is LeadStatus.UNASSIGNED:
            raise ValidationError("An assigned lead cannot be Unassigned; clear assigned_staff_id instead")
        lead.status = LeadStatus.ASSIGNED
