import pytest

from hospital_api.models.user import UserRole
from hospital_api.rbac import (
    PROTECTED_ROUTES,
    ROLE_PERMISSIONS,
    can_access_route,
    get_dashboard_for_role,
    get_display_name,
    get_permissions,
    has_permission,
    is_public_path,
)


def test_every_role_has_permissions_dashboard_and_name():
    for role in UserRole:
        assert get_permissions(role)
        assert get_dashboard_for_role(role) != "/login"
        assert get_display_name(role)


@pytest.mark.parametrize("role,permission,expected", [
    ("admin", "manage_users", True),
    ("admin", "manage_check_ins", False),
    ("doctor", "create_prescriptions", True),
    ("doctor", "dispense_medications", False),
    ("receptionist", "manage_check_ins", True),
    ("lab_tech", "enter_results", True),
    ("pharmacist", "dispense_medications", True),
    ("supplier", "manage_inventory", True),
    ("caregiver", "book_appointments", True),
    ("caregiver", "view_queue", False),
    ("staff", "manage_admissions", True),
])
def test_has_permission(role, permission, expected):
    assert has_permission(role, permission) is expected


def test_has_permission_matches_table_exactly():
    all_permissions = set().union(*ROLE_PERMISSIONS.values())
    for role, granted in ROLE_PERMISSIONS.items():
        for permission in all_permissions:
            assert has_permission(role, permission) == (permission in granted)


def test_enum_and_string_roles_are_equivalent():
    assert has_permission(UserRole.RECEPTIONIST, "view_queue")
    assert get_dashboard_for_role(UserRole.LAB_TECH) == "/lab"
    assert can_access_route(UserRole.PHARMACIST, "/pharmacy/prescriptions")


@pytest.mark.parametrize("role", ["janitor", "", "ADMIN", None])
def test_unknown_role_has_no_permissions(role):
    assert not has_permission(role, "manage_users")
    assert not has_permission(role, "view_appointments")
    assert get_permissions(role) == frozenset()


@pytest.mark.parametrize("path", [
    "/admin", "/admin/users", "/doctor/queue", "/lab/orders", "/patients",
    "/supplier/medications", "/anything/else", "/",
])
def test_admin_can_access_every_route(path):
    assert can_access_route("admin", path)


@pytest.mark.parametrize("role,path,expected", [
    ("doctor", "/doctor/queue", True),
    ("doctor", "/admin/stats", False),
    ("receptionist", "/receptionist/queue", True),
    ("receptionist", "/lab/orders", False),
    ("lab_tech", "/lab/orders", True),
    ("pharmacist", "/pharmacy/prescriptions", True),
    ("pharmacist", "/supplier/medications", False),
    ("caregiver", "/dashboard", True),
    ("caregiver", "/patients", True),
    ("caregiver", "/caregiver-appointments", True),
    ("caregiver", "/receptionist/queue", False),
    ("staff", "/staff-appointments", True),
    ("staff", "/doctor", False),
])
def test_guarded_routes(role, path, expected):
    assert can_access_route(role, path) is expected


@pytest.mark.parametrize("role", ["doctor", "caregiver", "supplier", "unknown"])
def test_unlisted_routes_are_open(role):
    assert can_access_route(role, "/roles")
    assert can_access_route(role, "/settings")


def test_first_matching_prefix_wins():
    prefixes = [prefix for prefix, _ in PROTECTED_ROUTES]
    assert prefixes.index("/admin") < prefixes.index("/doctor")
    # "/labels" starts with "/lab"
    assert not can_access_route("caregiver", "/labels")


def test_dashboard_lookup():
    assert get_dashboard_for_role("caregiver") == "/dashboard"
    assert get_dashboard_for_role("staff") == "/staff-appointments"
    assert get_dashboard_for_role("nobody") == "/login"


def test_display_names():
    assert get_display_name("lab_tech") == "Lab Technician"
    assert get_display_name(UserRole.ADMIN) == "Administrator"
    assert get_display_name("mystery") == "mystery"


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS["caregiver"] = frozenset({"manage_users"})
    assert isinstance(ROLE_PERMISSIONS["admin"], frozenset)


@pytest.mark.parametrize("path,expected", [
    ("/", True),
    ("/auth/login", True),
    ("/qr/abc123", True),
    ("/health", True),
    ("/qrcode", False),
    ("/receptionist/queue", False),
    ("/roles", False),
])
def test_public_paths(path, expected):
    assert is_public_path(path) is expected
