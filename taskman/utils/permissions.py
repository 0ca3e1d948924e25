# taskman/utils/permissions.py
import enum
from typing import Dict, List


class Role(str, enum.Enum):
    ADMIN = "admin"
    DESIGNER = "designer"
    PROJECT_MANAGER = "project_manager"
    SALES_REPRESENTATIVE = "sales_representative"
    EMPLOYEE = "employee"


class Permission(str, enum.Enum):
    CREATE_PROJECT = "create_project"
    EDIT_PROJECT = "edit_project"
    DELETE_PROJECT = "delete_project"
    VIEW_ALL_TASKS = "view_all_tasks"
    MANAGE_USERS = "manage_users"
    VIEW_REPORTS = "view_reports"


class Department(str, enum.Enum):
    DESIGN = "Design"
    PROJECT_MANAGEMENT = "Project Management"
    SALES = "Sales"
    ADMINISTRATION = "Administration"
    OTHER = "Other"


# Default permission set for every role; order is the order returned to clients
ROLE_PERMISSIONS: Dict[Role, List[Permission]] = {
    Role.ADMIN: [
        Permission.CREATE_PROJECT,
        Permission.EDIT_PROJECT,
        Permission.DELETE_PROJECT,
        Permission.VIEW_ALL_TASKS,
        Permission.MANAGE_USERS,
        Permission.VIEW_REPORTS,
    ],
    Role.DESIGNER: [
        Permission.CREATE_PROJECT,
        Permission.EDIT_PROJECT,
        Permission.VIEW_ALL_TASKS,
    ],
    Role.PROJECT_MANAGER: [
        Permission.CREATE_PROJECT,
        Permission.EDIT_PROJECT,
        Permission.VIEW_ALL_TASKS,
        Permission.VIEW_REPORTS,
    ],
    Role.SALES_REPRESENTATIVE: [
        Permission.VIEW_ALL_TASKS,
        Permission.VIEW_REPORTS,
    ],
    Role.EMPLOYEE: [
        Permission.VIEW_ALL_TASKS,
    ],
}


def default_permissions(role: str) -> List[str]:
    """Return the permission names implied by a role.

    Unknown roles fall back to the employee set.
    """
    try:
        key = Role(role)
    except ValueError:
        key = Role.EMPLOYEE
    return [permission.value for permission in ROLE_PERMISSIONS[key]]


def dashboard_route(role: str) -> str:
    """Client route a user lands on after login"""
    if role == Role.ADMIN.value:
        return "/admin-dashboard"
    return "/tasks"
