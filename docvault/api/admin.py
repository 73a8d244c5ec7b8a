"""Employee, department and maintenance endpoints (admin only, except the department list)."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from docvault.config import get_settings
from docvault.core.dependencies import require_admin
from docvault.core.redis import enqueue_job
from docvault.db.database import get_db
from docvault.db.models import Department, User
from docvault.db.repositories import DocumentRepository, UserRepository
from docvault.schemas.user import (
    DepartmentCreate,
    DepartmentResponse,
    DepartmentUpdate,
    EmployeeCreate,
    EmployeeUpdate,
    UserResponse,
)
from docvault.services.user_service import UserService
from docvault.workers.tasks import backfill_pending_content

logger = logging.getLogger(__name__)
router = APIRouter()


def _department_response(department: Department, employee_count: int = 0) -> DepartmentResponse:
    return DepartmentResponse.model_validate(department).model_copy(
        update={"employee_count": employee_count}
    )


# --- Employees (admin only) ---


@router.get("/employees", response_model=list[UserResponse])
async def list_employees(current_user: User = Depends(require_admin), db: Session = Depends(get_db)):
    """List every employee, newest first."""
    return UserRepository(db).list_directory(order_by_name=False)


@router.post("/employees", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate, current_user: User = Depends(require_admin), db: Session = Depends(get_db)
):
    return UserService(db).create_user(
        name=data.name,
        email=data.email,
        password=data.password,
        department=data.department,
        role=data.role,
    )


@router.put("/employees/{user_id}", response_model=UserResponse)
async def update_employee(
    user_id: str,
    data: EmployeeUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return UserService(db).update_user(user_id, **data.model_dump(exclude_unset=True))


@router.delete("/employees/{user_id}")
async def delete_employee(
    user_id: str, current_user: User = Depends(require_admin), db: Session = Depends(get_db)
):
    UserService(db).delete_user(current_user, user_id)
    return {"message": "User deleted successfully"}


# --- Departments ---


@router.get("/departments", response_model=list[DepartmentResponse])
async def list_departments(db: Session = Depends(get_db)):
    """List active departments with employee counts.

    Public so the registration form can offer department choices.
    """
    return [
        _department_response(dept, count) for dept, count in UserService(db).list_departments()
    ]


@router.post("/departments", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_department(
    data: DepartmentCreate, current_user: User = Depends(require_admin), db: Session = Depends(get_db)
):
    department = UserService(db).create_department(data.name, data.display_name, data.description)
    return _department_response(department)


@router.put("/departments/{department_id}", response_model=DepartmentResponse)
async def update_department(
    department_id: str,
    data: DepartmentUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    service = UserService(db)
    department = service.update_department(department_id, **data.model_dump(exclude_unset=True))
    return _department_response(department, service.departments.count_members(department.id))


@router.delete("/departments/{department_id}")
async def delete_department(
    department_id: str, current_user: User = Depends(require_admin), db: Session = Depends(get_db)
):
    UserService(db).delete_department(department_id)
    return {"message": "Department deleted successfully"}


# --- Maintenance ---


@router.post("/documents/backfill-content", status_code=status.HTTP_202_ACCEPTED)
async def backfill_document_content(
    background_tasks: BackgroundTasks,
    limit: int | None = Query(None, ge=1, le=1000),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Re-run text extraction for documents whose content is still empty."""
    settings = get_settings()
    batch = limit or settings.extraction_backfill_batch
    pending = len(DocumentRepository(db).pending_extraction(batch))
    job_id = await enqueue_job("backfill_document_content", limit)
    if job_id is None:
        background_tasks.add_task(backfill_pending_content, limit)
    logger.info(
        "content_backfill_requested",
        extra={"pending": pending, "job_id": job_id, "in_process": job_id is None},
    )
    return {"pending": pending, "job_id": job_id, "in_process": job_id is None}
