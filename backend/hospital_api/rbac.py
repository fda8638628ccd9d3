"""
Role-based access control tables and helpers.

All tables are built once at import time and exposed read-only. Lookups accept
either a ``UserRole`` member or its plain string value.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple, Union

from .models.user import UserRole

RoleLike = Union[UserRole, str]

LOGIN_PATH = "/login"


ROLE_PERMISSIONS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    UserRole.ADMIN.value: frozenset({
        "manage_users",
        "manage_staff",
        "view_all_appointments",
        "manage_admissions",
        "view_reports",
        "manage_settings",
        "view_all_patients",
        "manage_inventory",
    }),
    UserRole.DOCTOR.value: frozenset({
        "view_appointments",
        "manage_consultations",
        "create_prescriptions",
        "order_lab_tests",
        "view_lab_results",
        "update_patient_records",
        "view_patient_history",
    }),
    UserRole.RECEPTIONIST.value: frozenset({
        "view_appointments",
        "create_appointments",
        "manage_check_ins",
        "search_patients",
        "view_queue",
        "register_patients",
    }),
    UserRole.LAB_TECH.value: frozenset({
        "view_lab_orders",
        "collect_samples",
        "process_tests",
        "enter_results",
        "view_test_history",
    }),
    UserRole.PHARMACIST.value: frozenset({
        "view_prescriptions",
        "dispense_medications",
        "check_inventory",
        "manage_pharmacy_inventory",
        "view_drug_interactions",
    }),
    UserRole.SUPPLIER.value: frozenset({
        "view_orders",
        "manage_inventory",
        "create_deliveries",
        "view_invoices",
    }),
    UserRole.CAREGIVER.value: frozenset({
        "book_appointments",
        "view_own_appointments",
        "view_children",
        "view_prescriptions",
        "view_lab_results",
    }),
    UserRole.STAFF.value: frozenset({
        "view_appointments",
        "manage_admissions",
        "update_patient_records",
    }),
})

ROLE_DASHBOARDS: Mapping[str, str] = MappingProxyType({
    UserRole.ADMIN.value: "/admin",
    UserRole.DOCTOR.value: "/doctor",
    UserRole.RECEPTIONIST.value: "/receptionist",
    UserRole.LAB_TECH.value: "/lab",
    UserRole.PHARMACIST.value: "/pharmacy",
    UserRole.SUPPLIER.value: "/supplier",
    UserRole.CAREGIVER.value: "/dashboard",
    UserRole.STAFF.value: "/staff-appointments",
})

ROLE_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    UserRole.ADMIN.value: "Administrator",
    UserRole.DOCTOR.value: "Doctor",
    UserRole.RECEPTIONIST.value: "Receptionist",
    UserRole.LAB_TECH.value: "Lab Technician",
    UserRole.PHARMACIST.value: "Pharmacist",
    UserRole.SUPPLIER.value: "Supplier",
    UserRole.CAREGIVER.value: "Caregiver",
    UserRole.STAFF.value: "Staff",
})

# Ordered: the first matching prefix decides.
PROTECTED_ROUTES: Tuple[Tuple[str, FrozenSet[str]], ...] = (
    ("/admin", frozenset({"admin"})),
    ("/doctor", frozenset({"doctor", "admin"})),
    ("/receptionist", frozenset({"receptionist", "admin"})),
    ("/lab", frozenset({"lab_tech", "admin"})),
    ("/pharmacy", frozenset({"pharmacist", "admin"})),
    ("/supplier", frozenset({"supplier", "admin"})),
    ("/dashboard", frozenset({"caregiver"})),
    ("/caregiver-appointments", frozenset({"caregiver"})),
    ("/patients", frozenset({"caregiver"})),
    ("/staff-appointments", frozenset({"staff", "admin"})),
)

# Roles listed on the admin staff page.
STAFF_ROLES: Tuple[str, ...] = (
    UserRole.DOCTOR.value,
    UserRole.RECEPTIONIST.value,
    UserRole.LAB_TECH.value,
    UserRole.PHARMACIST.value,
    UserRole.SUPPLIER.value,
)

# Reachable without a session.
PUBLIC_PATHS: Tuple[str, ...] = (
    "/",
    "/login",
    "/register",
    "/callback",
    "/auth",
    "/qr",
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
)


def _role_key(role: RoleLike) -> str:
    if isinstance(role, UserRole):
        return role.value
    return str(role) if role is not None else ""


def has_permission(role: RoleLike, permission: str) -> bool:
    """True iff ``permission`` is granted to ``role``; unknown roles hold nothing."""
    return permission in ROLE_PERMISSIONS.get(_role_key(role), frozenset())


def get_permissions(role: RoleLike) -> FrozenSet[str]:
    return ROLE_PERMISSIONS.get(_role_key(role), frozenset())


def find_route_guard(path: str) -> Union[Tuple[str, FrozenSet[str]], None]:
    """Return the first protected (prefix, roles) entry matching ``path``."""
    for prefix, allowed_roles in PROTECTED_ROUTES:
        if path.startswith(prefix):
            return prefix, allowed_roles
    return None


def can_access_route(role: RoleLike, path: str) -> bool:
    """
    Decide whether ``role`` may reach ``path``.

    Admin passes everywhere. Paths that match no protected prefix are allowed;
    callers that need authentication on such paths must enforce it themselves.
    """
    key = _role_key(role)
    if key == UserRole.ADMIN.value:
        return True

    guard = find_route_guard(path)
    if guard is None:
        return True
    return key in guard[1]


def get_dashboard_for_role(role: RoleLike) -> str:
    return ROLE_DASHBOARDS.get(_role_key(role), LOGIN_PATH)


def get_display_name(role: RoleLike) -> str:
    key = _role_key(role)
    return ROLE_DISPLAY_NAMES.get(key, key)


def is_public_path(path: str) -> bool:
    """Exact match, or a sub-path of a public prefix."""
    for public in PUBLIC_PATHS:
        if path == public:
            return True
        if public != "/" and path.startswith(public + "/"):
            return True
    return False
