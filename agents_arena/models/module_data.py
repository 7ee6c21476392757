"""Per-user module data stored as JSON documents.

Each row holds one JSON document addressed by a key of the form
``user:{user_id}:module:{module_key}``. The arena stores its snapshot under
the ``agents-arena`` module key.
"""
from sqlalchemy import JSON
from sqlalchemy import String
from sqlalchemy.orm import Mapped
from sqlalchemy.orm import mapped_column

from agents_arena.models.base import Base


def module_data_key(user_id: str, module_key: str) -> str:
    """Build the storage key for a user's module document."""
    return f"user:{user_id}:module:{module_key}"


class ModuleData(Base):
    """JSON document owned by one user for one module."""

    __tablename__ = "module_data"

    key: Mapped[str] = mapped_column(
        String(512), unique=True, index=True, nullable=False, doc="Storage key"
    )
    user_id: Mapped[str] = mapped_column(
        String(255), index=True, nullable=False, doc="Owner of the document"
    )
    module_key: Mapped[str] = mapped_column(
        String(255), nullable=False, doc="Module the document belongs to"
    )
    data: Mapped[dict] = mapped_column(JSON, nullable=False, doc="Document body")

    def __repr__(self) -> str:
        return f"<ModuleData(key={self.key!r})>"


def parse_module_data_key(key: str) -> tuple[str, str]:
    """Split a storage key into (user_id, module_key).

    Raises:
        ValueError: If the key does not follow the
            ``user:{user_id}:module:{module_key}`` layout.
    """
    prefix, separator, module_key = key.partition(":module:")
    if not separator or not prefix.startswith("user:") or not module_key:
        raise ValueError(f"Malformed module data key: {key!r}")
    user_id = prefix[len("user:") :]
    if not user_id:
        raise ValueError(f"Malformed module data key: {key!r}")
    return user_id, module_key
