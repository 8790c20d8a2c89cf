from vacina_backend.core.permissions import RBACPermission


class ReceptionPermission(RBACPermission):
    """RBAC for the reception roster.

    - admin, operator, nurse: list, view and run reception transitions
    - auditor: read only
    """

    read_roles = {"admin", "operator", "nurse", "auditor"}
    write_roles = {"admin", "operator", "nurse"}
