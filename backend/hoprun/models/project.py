"""
프로젝트 모델
- 사용자 1명이 소유
- DB 연결과 1:N (실제로는 MAX_CONNECTIONS_PER_PROJECT 개까지)
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hoprun.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="projects")
    connections = relationship("DbConnection", back_populates="project", cascade="all, delete-orphan")
