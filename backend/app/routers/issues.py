"""
Issue endpoints.

Every route declares the Operation it performs; the role check happens in
the `require` dependency and record-level rules in IssueService.
"""

from fastapi import APIRouter, Depends, Query, status

from servicedesk.enums import IssueCategory, IssuePriority, IssueStatus
from servicedesk.models import Issue, User
from servicedesk.repositories import IssueFilters
from servicedesk.security import Operation
from servicedesk.services import IssueService, can_view

from ..auth.dependencies import get_issue_service, require, valid_issue_id
from ..schemas import (
    ApiResponse,
    AssignRequest,
    CommentCreateRequest,
    IssueCreateRequest,
    IssueResponse,
    IssueStatsResponse,
    IssueUpdateRequest,
    StatusUpdateRequest,
    envelope,
)

router = APIRouter(prefix="/issues", tags=["issues"])


def _serialize(issue: Issue) -> IssueResponse:
    return IssueResponse.model_validate(issue)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[IssueResponse],
    response_model_exclude_unset=True,
)
def create_issue(
    payload: IssueCreateRequest,
    current_user: User = Depends(require(Operation.ISSUE_CREATE)),
    service: IssueService = Depends(get_issue_service),
):
    issue = service.create_issue(current_user, payload.model_dump(exclude_unset=True))
    return envelope(_serialize(issue), message="Issue created successfully")


@router.get("", response_model=ApiResponse[list[IssueResponse]], response_model_exclude_unset=True)
def list_issues(
    status_filter: IssueStatus | None = Query(None, alias="status"),
    priority: IssuePriority | None = Query(None),
    category: IssueCategory | None = Query(None),
    reported_by: str | None = Query(None, alias="reportedBy"),
    assigned_to: str | None = Query(None, alias="assignedTo"),
    search: str | None = Query(None, max_length=200),
    current_user: User = Depends(require(Operation.ISSUE_LIST)),
    service: IssueService = Depends(get_issue_service),
):
    """
    List issues visible to the caller.

    Employees only ever see issues they reported and technicians only issues
    assigned to them; the query filters narrow that set further.
    """
    filters = IssueFilters(
        status=status_filter,
        priority=priority,
        category=category,
        reported_by_id=reported_by or None,
        assigned_to_id=assigned_to or None,
        search=(search or "").strip() or None,
    )
    issues = service.list_issues(current_user, filters)
    return envelope([_serialize(issue) for issue in issues], count=len(issues))


@router.get("/stats", response_model=ApiResponse[IssueStatsResponse], response_model_exclude_unset=True)
def issue_stats(
    current_user: User = Depends(require(Operation.ISSUE_LIST)),
    service: IssueService = Depends(get_issue_service),
):
    """Counts of the caller's visible issues by status, priority and category."""
    return envelope(IssueStatsResponse.model_validate(service.stats(current_user)))


@router.get("/{issue_id}", response_model=ApiResponse[IssueResponse], response_model_exclude_unset=True)
def get_issue(
    current_user: User = Depends(require(Operation.ISSUE_READ)),
    issue_id: str = Depends(valid_issue_id),
    service: IssueService = Depends(get_issue_service),
):
    return envelope(_serialize(service.get_issue(issue_id, current_user)))


@router.put("/{issue_id}", response_model=ApiResponse[IssueResponse], response_model_exclude_unset=True)
def update_issue(
    payload: IssueUpdateRequest,
    current_user: User = Depends(require(Operation.ISSUE_UPDATE)),
    issue_id: str = Depends(valid_issue_id),
    service: IssueService = Depends(get_issue_service),
):
    issue = service.update_issue(issue_id, current_user, payload.model_dump(exclude_unset=True))
    return envelope(_serialize(issue), message="Issue updated successfully")


@router.delete("/{issue_id}", response_model=ApiResponse[None], response_model_exclude_unset=True)
def delete_issue(
    current_user: User = Depends(require(Operation.ISSUE_DELETE)),
    issue_id: str = Depends(valid_issue_id),
    service: IssueService = Depends(get_issue_service),
):
    service.delete_issue(issue_id)
    return envelope(message="Issue deleted successfully")


@router.put("/{issue_id}/assign", response_model=ApiResponse[IssueResponse], response_model_exclude_unset=True)
def assign_issue(
    payload: AssignRequest,
    current_user: User = Depends(require(Operation.ISSUE_ASSIGN)),
    issue_id: str = Depends(valid_issue_id),
    service: IssueService = Depends(get_issue_service),
):
    issue = service.assign(issue_id, payload.technician_id)
    return envelope(_serialize(issue), message="Issue assigned successfully")


@router.put("/{issue_id}/status", response_model=ApiResponse[IssueResponse], response_model_exclude_unset=True)
def update_issue_status(
    payload: StatusUpdateRequest,
    current_user: User = Depends(require(Operation.ISSUE_UPDATE_STATUS)),
    issue_id: str = Depends(valid_issue_id),
    service: IssueService = Depends(get_issue_service),
):
    issue = service.update_status(issue_id, current_user, payload.status, payload.resolution_notes)
    return envelope(_serialize(issue), message="Status updated successfully")


@router.post("/{issue_id}/comments", response_model=ApiResponse[IssueResponse], response_model_exclude_unset=True)
def add_comment(
    payload: CommentCreateRequest,
    current_user: User = Depends(require(Operation.ISSUE_COMMENT)),
    issue_id: str = Depends(valid_issue_id),
    service: IssueService = Depends(get_issue_service),
):
    issue = service.add_comment(issue_id, current_user, payload.text)
    if not can_view(issue, current_user):
        # Commenting does not grant read access to the issue
        return envelope(message="Comment added successfully")
    return envelope(_serialize(issue), message="Comment added successfully")
