"""User and department schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr


class DepartmentInfo(BaseModel):
    id: str
    name: str
    display_name: str

    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    department_id: str
    department: DepartmentInfo | None = None
    is_active: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Minimal user shape used in share lists."""

    id: str
    name: str
    email: str

    class Config:
        from_attributes = True


class EmployeeCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    department: str  # id or name
    role: str = "employee"


class EmployeeUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    role: str | None = None
    department: str | None = None
    is_active: bool | None = None


class DepartmentCreate(BaseModel):
    name: str
    display_name: str
    description: str | None = None


class DepartmentUpdate(BaseModel):
    display_name: str | None = None
    description: str | None = None
    is_active: bool | None = None


class DepartmentResponse(BaseModel):
    id: str
    name: str
    display_name: str
    description: str | None
    is_active: bool
    employee_count: int = 0

    class Config:
        from_attributes = True
