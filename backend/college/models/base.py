"""
Colonnes communes à toutes les entités métier : identifiant entier et nom.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import validates

NAME_MAX_LENGTH = 70


class EntityMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)

    @validates("name")
    def _validate_name(self, key, value):
        if value is None or not str(value).strip():
            raise ValueError("Le nom ne peut pas être vide.")
        if len(value) > NAME_MAX_LENGTH:
            raise ValueError(f"Le nom dépasse {NAME_MAX_LENGTH} caractères.")
        return value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} name={self.name!r}>"
