"""
Informations sensibles générées à la création d'un étudiant :
adresse email universitaire et mot de passe initial.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from college.database import Base


class StudentCrucialInformation(Base):
    __tablename__ = "student_crucial_information"

    student_code = Column(String(12), primary_key=True)
    student_id = Column(Integer, ForeignKey("persons.id", ondelete="CASCADE"), unique=True, nullable=False)
    university_email = Column(String(255), nullable=False)
    password = Column(String(64), nullable=False)

    student = relationship("Student", back_populates="crucial_information")
