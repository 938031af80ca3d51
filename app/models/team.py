# app/models/team.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True, index=True)
    # The lead does not have to be a member; users.team_id points back here
    lead_id = Column(Integer, ForeignKey("users.id", use_alter=True, name="fk_teams_lead_id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    lead = relationship("User", foreign_keys=[lead_id], post_update=True)
    members = relationship("User", foreign_keys="User.team_id", back_populates="team", order_by="User.id")
    tasks = relationship("Task", back_populates="team", order_by="(Task.due_date.asc().nulls_last(), Task.id)")

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def task_count(self) -> int:
        return len(self.tasks)
