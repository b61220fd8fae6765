"""Task management endpoints."""

from fastapi import APIRouter, status

from ..dependencies import AppSettings, AppTaskRequestService, AppTaskService
from ..exceptions import NotFoundError
from ..schemas import (
    ApiResponse,
    TaskCreate,
    TaskRequestAccepted,
    TaskRequestCreate,
    TaskResponse,
    TaskUpdate,
)
from ..task_requests import accept_task_request

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "",
    response_model=ApiResponse[list[TaskResponse]],
    response_model_exclude_none=True,
    summary="List tasks",
)
async def list_tasks(service: AppTaskService) -> ApiResponse[list[TaskResponse]]:
    """List all tasks.

    Args:
        service: Task service

    Returns:
        All tasks in repository order
    """
    tasks = await service.get_all_tasks()
    return ApiResponse[list[TaskResponse]](
        success=True,
        data=[TaskResponse.from_task(task) for task in tasks],
    )


@router.get(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    response_model_exclude_none=True,
    summary="Get task",
)
async def get_task(task_id: str, service: AppTaskService) -> ApiResponse[TaskResponse]:
    """Get a single task.

    Args:
        task_id: Task identifier
        service: Task service

    Returns:
        The task

    Raises:
        NotFoundError: If no task has this id
    """
    task = await service.get_task_by_id(task_id)
    if task is None:
        raise NotFoundError("Task", task_id)
    return ApiResponse[TaskResponse](success=True, data=TaskResponse.from_task(task))


@router.post(
    "",
    response_model=ApiResponse[TaskResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
async def create_task(
    request: TaskCreate,
    service: AppTaskService,
) -> ApiResponse[TaskResponse]:
    """Create a new task.

    Args:
        request: Task creation request
        service: Task service

    Returns:
        Created task (201 Created)
    """
    task = await service.create_task(request.title, request.description)
    return ApiResponse[TaskResponse](success=True, data=TaskResponse.from_task(task))


@router.post(
    "/queue",
    response_model=TaskRequestAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Queue task creation",
)
async def queue_task(
    request: TaskRequestCreate,
    service: AppTaskRequestService,
    settings: AppSettings,
) -> TaskRequestAccepted:
    """Send a task creation request to the queue for later processing.

    Args:
        request: Task request body
        service: Task request service
        settings: Application settings

    Returns:
        Acknowledgement with the request id (202 Accepted)
    """
    return await accept_task_request(service, request, settings.api)


@router.put(
    "/{task_id}",
    response_model=ApiResponse[TaskResponse],
    response_model_exclude_none=True,
    summary="Update task",
)
async def update_task(
    task_id: str,
    request: TaskUpdate,
    service: AppTaskService,
) -> ApiResponse[TaskResponse]:
    """Replace a task's title, description and completion state.

    Args:
        task_id: Task identifier
        request: Task update request
        service: Task service

    Returns:
        Updated task

    Raises:
        NotFoundError: If no task has this id
    """
    task = await service.update_task(
        task_id,
        request.title,
        request.description,
        request.completed,
    )
    if task is None:
        raise NotFoundError("Task", task_id)
    return ApiResponse[TaskResponse](success=True, data=TaskResponse.from_task(task))


@router.delete(
    "/{task_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    summary="Delete task",
)
async def delete_task(task_id: str, service: AppTaskService) -> ApiResponse[None]:
    """Delete a task.

    Args:
        task_id: Task identifier
        service: Task service

    Returns:
        Confirmation message

    Raises:
        NotFoundError: If no task has this id
    """
    deleted = await service.delete_task(task_id)
    if not deleted:
        raise NotFoundError("Task", task_id)
    return ApiResponse[None](success=True, message="Task deleted successfully")
