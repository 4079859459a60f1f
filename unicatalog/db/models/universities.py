from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    false,
)
from sqlalchemy.orm import relationship

from .base import Base


class University(Base):
    __tablename__ = 'universities'
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    country = Column(String(100), nullable=False)
    alpha_two_code = Column(String(2), nullable=False, default='')
    state_province = Column(String(100), nullable=False, default='')
    domains = Column(String(255), nullable=False, default='')
    web_pages = Column(String(255), nullable=False, default='')
    school = Column(String(255), nullable=False, default='')
    department = Column(String(255), nullable=False, default='')
    description = Column(String(1024), nullable=False, default='')
    contact = Column(String(255), nullable=False, default='')
    comments = Column(String(2048), nullable=False, default='')
    # True once a person edited the record locally; imports leave it alone.
    modified = Column(Boolean, nullable=False, default=False, server_default=false())

    view = relationship(
        "UniversityView",
        back_populates="university",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index('idx_universities_country', 'country'),
        Index('uq_universities_name_country', 'name', 'country', unique=True),
    )


class UniversityView(Base):
    __tablename__ = 'university_views'
    university_id = Column(
        Integer,
        ForeignKey('universities.id', ondelete='CASCADE'),
        primary_key=True,
    )
    view_count = Column(Integer, nullable=False, default=0)

    university = relationship("University", back_populates="view")

    __table_args__ = (
        CheckConstraint('view_count >= 0', name='ck_university_views_count_non_negative'),
    )
