"""
Agent ORM model.

Tenant boundary for knowledge bases. Only the columns the RAG core needs
are mapped here; profile and billing data live elsewhere.

Dependencies: sqlalchemy, agent_rag.boundary.db.base
System role: Owner of documents and embeddings (cascade root)
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agent_rag.boundary.db.base import Base, UUIDMixin, TimestampMixin


class AgentModel(Base, UUIDMixin, TimestampMixin):
    """
    Agent ORM model.

    Attributes:
        id: UUID primary key
        name: Display name

    Relationships:
        documents: One-to-many with DocumentModel (cascade delete)
    """

    __tablename__ = "agents"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    documents = relationship(
        "DocumentModel",
        back_populates="agent",
        cascade="all, delete-orphan",
    )
