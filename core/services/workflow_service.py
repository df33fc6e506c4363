# =============================================================================
# core/services/workflow_service.py - Accept / Reject / Withdraw Workflow
# =============================================================================
# One implementation of the request lifecycle shared by applications and
# invitations. Whatever surface triggers it (received/sent lists, the project
# management page) gets the same WorkflowResult back.
#
# Accepting is three dependent backend calls:
#   1. status -> accepted   (filtered by id AND status = pending)
#   2. insert project_members row
#   3. rpc increment_team_size
# A failed step 2 reverts step 1 (best effort, result records whether the
# revert landed). A failed step 3 is logged and reported via team_size_synced.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient, SupabaseClientError, is_unique_violation
from lib.utils import normalize_uuid, utc_now_iso
from core.models.project import MemberRole
from core.models.request import RequestStatus
from core.models.workflow import Notification, WorkflowOutcome, WorkflowResult
from app.exceptions import RejectionReasonRequiredError, RequestNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestKind:
    """
    Per-table differences between applications and invitations.

    Attributes:
        table: Table holding the rows
        requester_column: User who created the row (may withdraw it)
        joiner_column: User who joins the team when the row is accepted
        responder: "creator" if the project creator responds, "joiner" if the
            joining user responds
        default_accept_message: response_message written when none is given
        messages: Notification title/description per event
    """
    table: str
    requester_column: str
    joiner_column: str
    responder: str
    select_columns: str
    default_accept_message: str
    messages: dict[str, tuple[str, str | None]] = field(default_factory=dict)

    def notice(self, event: str, **values: Any) -> Notification:
        title, description = self.messages[event]
        if description:
            description = description.format(**values)
        return Notification(title=title, description=description)


_COMMON_MESSAGES = {
    "load_failed": ("系統錯誤", "發生未預期的錯誤，請稍後再試"),
    "join_failed": ("加入專案失敗", "可能已經是專案成員或專案已滿"),
}

APPLICATION = RequestKind(
    table="applications",
    requester_column="applicant_id",
    joiner_column="applicant_id",
    responder="creator",
    select_columns=(
        "*, project:projects!project_id(id, title, creator_id), "
        "applicant:users!applicant_id(id, name, avatar_url)"
    ),
    default_accept_message="恭喜！你的申請已通過，歡迎加入我們的專案！",
    messages={
        **_COMMON_MESSAGES,
        "join_failed": ("加入專案失敗", "申請者可能已經是專案成員或專案已滿"),
        "accepted": ("申請已通過！", "{name} 已成功加入專案"),
        "accept_failed": ("接受申請失敗", "請稍後再試或檢查網路連線"),
        "rejected": ("申請已拒絕", "已成功回應申請"),
        "reject_failed": ("拒絕申請失敗", "請稍後再試或檢查網路連線"),
        "withdrawn": ("申請已撤回", "已成功撤回申請"),
        "withdraw_failed": ("撤回申請失敗", "請稍後再試或檢查網路連線"),
        "already_processed": ("此申請已被處理", "申請狀態已變更，請重新整理頁面"),
    },
)

INVITATION = RequestKind(
    table="invitations",
    requester_column="inviter_id",
    joiner_column="invitee_id",
    responder="joiner",
    select_columns=(
        "*, project:projects!project_id(id, title, creator_id), "
        "invitee:users!invitee_id(id, name, avatar_url)"
    ),
    default_accept_message="感謝邀請，我很樂意加入這個專案！",
    messages={
        **_COMMON_MESSAGES,
        "accepted": ("已接受邀請！", "成功加入「{title}」專案"),
        "accept_failed": ("接受邀請失敗", "請稍後再試或檢查網路連線"),
        "rejected": ("已拒絕邀請", "已成功回應邀請"),
        "reject_failed": ("拒絕邀請失敗", "請稍後再試或檢查網路連線"),
        "withdrawn": ("邀請已撤回", "已成功撤回邀請"),
        "withdraw_failed": ("撤回邀請失敗", "請稍後再試或檢查網路連線"),
        "already_processed": ("此邀請已被處理", "邀請狀態已變更，請重新整理頁面"),
    },
)


class WorkflowService:
    """
    Service for status transitions of applications and invitations.

    All methods take the RequestKind first so the same code path serves
    both tables.
    """

    # -------------------------------------------------------------------------
    # Accept
    # -------------------------------------------------------------------------

    @staticmethod
    def accept(
        kind: RequestKind,
        request_id: str | UUID,
        actor_id: str | UUID,
        response_message: str | None = None,
    ) -> WorkflowResult:
        """
        Accept a pending request and add the joining user to the team.

        Args:
            kind: APPLICATION or INVITATION
            request_id: Row UUID
            actor_id: Project creator (applications) or invitee (invitations)
            response_message: Message for the requester (defaults per kind)

        Returns:
            WorkflowResult; SUCCESS means status, membership and (unless
            team_size_synced is False) the team-size counter were written

        Raises:
            RequestNotFoundError: If the row doesn't exist or the actor may not respond
        """
        request_id_str = normalize_uuid(request_id)
        actor_id_str = normalize_uuid(actor_id)

        try:
            row = WorkflowService._load_for_response(kind, request_id_str, actor_id_str)
        except SupabaseClientError as e:
            logger.error(f"Failed to load {kind.table} {request_id_str}: {e}")
            return WorkflowResult(
                outcome=WorkflowOutcome.BACKEND_ERROR,
                notification=kind.notice("load_failed"),
            )

        if row.get("status") != RequestStatus.PENDING.value:
            return WorkflowService._already_processed(kind, row)

        client = SupabaseClient.get_client()

        # Step 1: status -> accepted, only while still pending
        try:
            query = (
                client.table(kind.table)
                .update({
                    "status": RequestStatus.ACCEPTED.value,
                    "response_message": (response_message or "").strip() or kind.default_accept_message,
                    "updated_at": utc_now_iso(),
                })
                .eq("id", request_id_str)
                .eq("status", RequestStatus.PENDING.value)
            )
            if kind.responder == "joiner":
                query = query.eq(kind.joiner_column, actor_id_str)
            response = query.execute()

        except Exception as e:
            logger.error(f"Failed to accept {kind.table} {request_id_str}: {e}")
            return WorkflowResult(
                outcome=WorkflowOutcome.BACKEND_ERROR,
                request=row,
                notification=kind.notice("accept_failed"),
            )

        if not response.data:
            logger.info(f"{kind.table} {request_id_str} was processed concurrently, nothing accepted")
            return WorkflowService._already_processed(kind, row)

        accepted = {**row, **response.data[0]}
        project_id = str(row["project_id"])
        joiner_id = str(row[kind.joiner_column])

        # Step 2: add the joining user to the team
        try:
            (
                client.table("project_members")
                .insert({
                    "project_id": project_id,
                    "user_id": joiner_id,
                    "role": MemberRole.MEMBER.value,
                })
                .execute()
            )

        except Exception as e:
            conflict = is_unique_violation(e)
            logger.error(
                f"Failed to add user {joiner_id} to project {project_id} "
                f"after accepting {kind.table} {request_id_str}: {e}"
            )
            compensated = WorkflowService._revert_to_pending(kind, request_id_str, row)
            reverted = {**accepted, "status": RequestStatus.PENDING.value,
                        "response_message": row.get("response_message")}
            return WorkflowResult(
                outcome=WorkflowOutcome.CONFLICT if conflict else WorkflowOutcome.BACKEND_ERROR,
                request=reverted if compensated else accepted,
                notification=kind.notice("join_failed"),
                compensated=compensated,
            )

        # Step 3: keep current_team_size in step with membership
        team_size_synced = True
        try:
            SupabaseClient.increment_team_size(project_id)
        except SupabaseClientError as e:
            logger.warning(f"Team size of project {project_id} not incremented: {e}")
            team_size_synced = False

        logger.info(f"Accepted {kind.table} {request_id_str}; user {joiner_id} joined project {project_id}")

        joiner = row.get(kind.joiner_column.removesuffix("_id")) or {}
        project = row.get("project") or {}
        return WorkflowResult(
            outcome=WorkflowOutcome.SUCCESS,
            request=accepted,
            notification=kind.notice(
                "accepted",
                name=joiner.get("name") or "申請者",
                title=project.get("title") or "",
            ),
            team_size_synced=team_size_synced,
        )

    # -------------------------------------------------------------------------
    # Reject
    # -------------------------------------------------------------------------

    @staticmethod
    def reject(
        kind: RequestKind,
        request_id: str | UUID,
        actor_id: str | UUID,
        reason: str | None,
    ) -> WorkflowResult:
        """
        Reject a pending request with a reason.

        Never touches project_members or the team size.

        Raises:
            RejectionReasonRequiredError: If reason is empty or whitespace
            RequestNotFoundError: If the row doesn't exist or the actor may not respond
        """
        reason = (reason or "").strip()
        if not reason:
            raise RejectionReasonRequiredError()

        request_id_str = normalize_uuid(request_id)
        actor_id_str = normalize_uuid(actor_id)

        try:
            row = WorkflowService._load_for_response(kind, request_id_str, actor_id_str)
        except SupabaseClientError as e:
            logger.error(f"Failed to load {kind.table} {request_id_str}: {e}")
            return WorkflowResult(
                outcome=WorkflowOutcome.BACKEND_ERROR,
                notification=kind.notice("load_failed"),
            )

        if row.get("status") != RequestStatus.PENDING.value:
            return WorkflowService._already_processed(kind, row)

        client = SupabaseClient.get_client()

        try:
            query = (
                client.table(kind.table)
                .update({
                    "status": RequestStatus.REJECTED.value,
                    "response_message": reason,
                    "updated_at": utc_now_iso(),
                })
                .eq("id", request_id_str)
                .eq("status", RequestStatus.PENDING.value)
            )
            if kind.responder == "joiner":
                query = query.eq(kind.joiner_column, actor_id_str)
            response = query.execute()

        except Exception as e:
            logger.error(f"Failed to reject {kind.table} {request_id_str}: {e}")
            return WorkflowResult(
                outcome=WorkflowOutcome.BACKEND_ERROR,
                request=row,
                notification=kind.notice("reject_failed"),
            )

        if not response.data:
            return WorkflowService._already_processed(kind, row)

        logger.info(f"Rejected {kind.table} {request_id_str}")
        return WorkflowResult(
            outcome=WorkflowOutcome.SUCCESS,
            request={**row, **response.data[0]},
            notification=kind.notice("rejected"),
        )

    # -------------------------------------------------------------------------
    # Withdraw
    # -------------------------------------------------------------------------

    @staticmethod
    def withdraw(
        kind: RequestKind,
        request_id: str | UUID,
        actor_id: str | UUID,
    ) -> WorkflowResult:
        """
        Delete a pending request on behalf of the user who created it.

        Raises:
            RequestNotFoundError: If the row doesn't exist or the actor didn't create it
        """
        request_id_str = normalize_uuid(request_id)
        actor_id_str = normalize_uuid(actor_id)

        try:
            row = SupabaseClient.fetch_row(kind.table, request_id_str)
        except SupabaseClientError as e:
            logger.error(f"Failed to load {kind.table} {request_id_str}: {e}")
            return WorkflowResult(
                outcome=WorkflowOutcome.BACKEND_ERROR,
                notification=kind.notice("load_failed"),
            )

        if not row or str(row.get(kind.requester_column)) != actor_id_str:
            raise RequestNotFoundError(kind.table, request_id_str)

        if row.get("status") != RequestStatus.PENDING.value:
            return WorkflowService._already_processed(kind, row)

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(kind.table)
                .delete()
                .eq("id", request_id_str)
                .eq(kind.requester_column, actor_id_str)
                .eq("status", RequestStatus.PENDING.value)
                .execute()
            )

        except Exception as e:
            logger.error(f"Failed to withdraw {kind.table} {request_id_str}: {e}")
            return WorkflowResult(
                outcome=WorkflowOutcome.BACKEND_ERROR,
                request=row,
                notification=kind.notice("withdraw_failed"),
            )

        if not response.data:
            return WorkflowService._already_processed(kind, row)

        logger.info(f"Withdrew {kind.table} {request_id_str}")
        return WorkflowResult(
            outcome=WorkflowOutcome.SUCCESS,
            request=response.data[0],
            notification=kind.notice("withdrawn"),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _load_for_response(
        kind: RequestKind,
        request_id: str,
        actor_id: str,
    ) -> dict[str, Any]:
        """
        Load a row with its project and verify the actor may respond to it.

        Raises:
            RequestNotFoundError: If the row doesn't exist or the actor may not respond
            SupabaseClientError: If a query fails
        """
        row = SupabaseClient.fetch_row(kind.table, request_id, kind.select_columns)
        if not row:
            raise RequestNotFoundError(kind.table, request_id)

        if kind.responder == "creator":
            project = row.get("project") or SupabaseClient.fetch_project(row["project_id"])
            allowed = bool(project) and str(project.get("creator_id")) == actor_id
        else:
            allowed = str(row.get(kind.joiner_column)) == actor_id

        if not allowed:
            # Don't reveal that the row exists
            raise RequestNotFoundError(kind.table, request_id)

        return row

    @staticmethod
    def _revert_to_pending(kind: RequestKind, request_id: str, original: dict[str, Any]) -> bool:
        """Put an accepted row back to pending. Returns whether a row was reverted."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(kind.table)
                .update({
                    "status": RequestStatus.PENDING.value,
                    "response_message": original.get("response_message"),
                    "updated_at": utc_now_iso(),
                })
                .eq("id", request_id)
                .eq("status", RequestStatus.ACCEPTED.value)
                .execute()
            )

        except Exception as e:
            logger.error(f"Could not revert {kind.table} {request_id} to pending: {e}")
            return False

        if not response.data:
            logger.error(f"Revert of {kind.table} {request_id} matched no accepted row")
            return False

        logger.info(f"Reverted {kind.table} {request_id} to pending")
        return True

    @staticmethod
    def _already_processed(kind: RequestKind, row: dict[str, Any]) -> WorkflowResult:
        return WorkflowResult(
            outcome=WorkflowOutcome.ALREADY_PROCESSED,
            request=row,
            notification=kind.notice("already_processed"),
        )
