from vacina_backend.core.permissions import RBACPermission


class VaccinePermission(RBACPermission):
    """RBAC for the vaccine catalog.

    - every staff role: read
    - catalog maintenance happens in the admin
    """

    read_roles = {"admin", "operator", "nurse", "auditor"}
    write_roles = set()
