from __future__ import annotations

import uuid
from datetime import datetime

from campreg.db.models.enums import UserRole
from .base import APIModel


class UserOut(APIModel):
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    created_at: datetime
    updated_at: datetime
