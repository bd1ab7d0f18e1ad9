"""Service layer for business logic.

Each function is transport agnostic and operates directly on a SQLModel
``Session`` instance; the routers only parse HTTP input and shape the
response.
"""

from .attachments import (
    Attachment,
    COVER_IMAGE,
    PITCH_DECK,
    check_upload,
    encode_attachment,
    read_attachment,
)
from .startups import (
    build_new_document,
    merge_document,
    create_startup,
    update_startup,
    get_startup,
    list_owner_startups,
    list_dashboard,
    delete_startup,
)
from .users import signup, signin, get_user
