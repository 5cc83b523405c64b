from enum import Enum


class Role(str, Enum):
    """Roles carried in the ``role`` claim of an access token.

    Admins curate the catalog (content, ordering); users book tours and
    apply for visas.
    """

    admin = "admin"
    user = "user"
