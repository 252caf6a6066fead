from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.hospital.domain.models.common import utcnow


class AdminBase(DeclarativeBase):
    """Metadata for the admin service database."""


class ConsultationsBase(DeclarativeBase):
    """Metadata for the consultations service database.

    Kept separate from :class:`AdminBase`: the two services own different
    databases, so consultation rows cannot carry foreign keys to doctors or
    centres.
    """


class CenterORM(AdminBase):
    __tablename__ = "centros"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    direccion: Mapped[Optional[str]] = mapped_column(String(250), nullable=True)
    ciudad: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    telefono: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class SpecialtyORM(AdminBase):
    __tablename__ = "especialidades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class EmployeeORM(AdminBase):
    __tablename__ = "empleados"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    cedula: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    cargo: Mapped[str] = mapped_column(String(100), nullable=False)
    centro_id: Mapped[int] = mapped_column(ForeignKey("centros.id"), nullable=False)


class UserORM(AdminBase):
    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    correo: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="empleado")
    centro_id: Mapped[Optional[int]] = mapped_column(ForeignKey("centros.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class DoctorORM(AdminBase):
    __tablename__ = "medicos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    cedula: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    telefono: Mapped[str] = mapped_column(String(50), nullable=False)
    especialidad_id: Mapped[int] = mapped_column(ForeignKey("especialidades.id"), nullable=False)
    centro_id: Mapped[int] = mapped_column(ForeignKey("centros.id"), nullable=False)
    usuario_id: Mapped[Optional[int]] = mapped_column(ForeignKey("usuarios.id"), nullable=True, unique=True)


class ConsultationORM(ConsultationsBase):
    __tablename__ = "consultas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    paciente: Mapped[str] = mapped_column(String, nullable=False)
    # Ids owned by the admin service; no foreign keys across databases.
    doctor_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    centro_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    fecha: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notas: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    estado: Mapped[str] = mapped_column(String(20), nullable=False, default="programada")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
