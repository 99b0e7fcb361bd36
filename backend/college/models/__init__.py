# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les relations déclarées par nom.
# Department et Address doivent être connus avant la hiérarchie Person.

from college.models.address import Address  # noqa: F401
from college.models.department import Department  # noqa: F401
from college.models.person import Administrator, Person, Professor, Student  # noqa: F401
from college.models.course import Course, StudentCourse  # noqa: F401
from college.models.exam import Exam  # noqa: F401
from college.models.grade import Grade  # noqa: F401
from college.models.student_info import StudentCrucialInformation  # noqa: F401
from college.models.user import AppUser  # noqa: F401
