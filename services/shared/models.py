"""Shared database models for the DTree node hierarchy."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class DTreeNode(Base):
    """A node in the repository hierarchy.

    Top-level nodes have a ParentID of -1. Volumes (projects, discussions,
    channels, task lists) also have a row with the negated DataID whose
    ParentID is the real container; their contents point at the negated id.
    """
    __tablename__ = 'DTree'

    data_id = Column('DataID', Integer, primary_key=True, autoincrement=False)
    parent_id = Column('ParentID', Integer, nullable=False)
    name = Column('Name', String(248), nullable=True)
    sub_type = Column('SubType', Integer, nullable=False, default=0)
    modify_date = Column('ModifyDate', DateTime, nullable=False, default=datetime.utcnow)

    # Indexes
    __table_args__ = (
        Index('idx_dtree_parent_id', 'ParentID'),
        Index('idx_dtree_modify_date', 'ModifyDate', 'DataID'),
    )

    def __repr__(self) -> str:
        return f"DTreeNode(data_id={self.data_id}, parent_id={self.parent_id})"
