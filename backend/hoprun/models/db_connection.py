"""
DB 커넥션 모델 (Text-to-SQL 대상 DB)
"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, ForeignKey
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hoprun.db.base import Base


class DbConnection(Base):
    __tablename__ = "db_connections"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    db_type = Column(String(20), nullable=False, default="postgresql")  # postgresql | sqlite
    host = Column(String(255), default="")
    port = Column(Integer, default=5432)
    database = Column(String(255), nullable=False)
    username = Column(String(255), default="")
    encrypted_password = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    project = relationship("Project", back_populates="connections")
