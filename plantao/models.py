from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    user_type = Column(String(20), default="doctor", nullable=False)  # doctor, hospital
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    time_slots = relationship("TimeSlot", back_populates="doctor", cascade="all, delete-orphan")
    profile = relationship("DoctorProfile", back_populates="user", uselist=False)


class TimeSlot(Base):
    """A doctor-declared interval of availability on a calendar day"""

    __tablename__ = "time_slots"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)  # HH:MM, zero-padded
    end_time = Column(String(5), nullable=False)  # HH:MM, zero-padded
    specialties = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    doctor = relationship("User", back_populates="time_slots")


class Proposal(Base):
    """Shift offer issued by a hospital"""

    __tablename__ = "proposals"

    id = Column(Integer, primary_key=True, index=True)
    # Null while the offer is open to every doctor of the specialty
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    hospital_id = Column(String(255), nullable=False, index=True)
    hospital = Column(String(255), nullable=False)
    specialty = Column(String(120), nullable=False, index=True)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)  # HH:MM
    duration = Column(String(50), nullable=False)  # e.g. "12h"
    location = Column(String(500), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    requirements = Column(Text, nullable=True)
    value = Column(Float, nullable=False)

    # Status workflow: pending → accepted | rejected (both terminal)
    status = Column(String(20), default="pending", nullable=False, index=True)

    # {name, description, founded, employees, specialties[]}
    hospital_profile = Column(JSON, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    contract = relationship("Contract", back_populates="proposal", uselist=False)


class Contract(Base):
    """Binding record created when a doctor accepts a proposal"""

    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, index=True)
    proposal_id = Column(Integer, ForeignKey("proposals.id"), unique=True, nullable=False)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Shift fields copied verbatim from the proposal at acceptance time
    hospital_id = Column(String(255), nullable=False)
    hospital = Column(String(255), nullable=False)
    specialty = Column(String(120), nullable=False)
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)
    duration = Column(String(50), nullable=False)
    location = Column(String(500), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    value = Column(Float, nullable=False)

    # Status workflow: upcoming → completed | canceled (both terminal)
    status = Column(String(20), default="upcoming", nullable=False, index=True)
    # Attendance workflow: pending → checked_in → checked_out
    attendance = Column(String(20), default="pending", nullable=False)

    check_in_time = Column(DateTime, nullable=True)
    check_in_latitude = Column(Float, nullable=True)
    check_in_longitude = Column(Float, nullable=True)
    check_out_time = Column(DateTime, nullable=True)
    check_out_latitude = Column(Float, nullable=True)
    check_out_longitude = Column(Float, nullable=True)
    canceled_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    proposal = relationship("Proposal", back_populates="contract")


class DoctorProfile(Base):
    __tablename__ = "doctor_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    personal = Column(JSON, default=dict, nullable=False)
    professional = Column(JSON, default=dict, nullable=False)
    financial = Column(JSON, default=dict, nullable=False)

    photo_key = Column(String(500), nullable=True)  # R2 key for profile photo
    documents = Column(JSON, default=dict, nullable=False)  # {doc_type: R2 key}
    documents_submitted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")


class FacialCapture(Base):
    """One camera frame captured by the check-in identity step"""

    __tablename__ = "facial_captures"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    contract_id = Column(Integer, ForeignKey("contracts.id"), nullable=True, index=True)
    action = Column(String(20), nullable=False)  # check_in, check_out
    image_key = Column(String(500), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
