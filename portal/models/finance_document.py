"""Finance document model"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from portal.database import Base


class FinanceDocument(Base):
    __tablename__ = "finance_documents"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    client_id = Column(Integer, nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True, index=True)
    type = Column(String(50), nullable=False)  # invoice, receipt, contract
    name = Column(String(255), nullable=False)
    path = Column(String(500), nullable=False)
    amount = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False)  # pending, paid, overdue
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False)
