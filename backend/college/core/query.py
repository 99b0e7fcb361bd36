"""
Mini-langage de filtrage et traduction vers des requêtes SQLAlchemy.

Syntaxe acceptée dans le paramètre `query` des routes :
    and::Age>=20,DepartmentId==1::and
    or::Name=='Ali Hassan',Name=='Sara Adel'::or
    StudentCode==ST2419104512          (liste nue = ET)
Plusieurs groupes sont combinés par ET. Opérateurs : == != >= <= > <.
`null` désigne la valeur NULL (uniquement avec == et !=).

Les noms de champs sont ceux des vues (schémas Pydantic) ; l'ExpressionMapper
les fait correspondre, par nom, aux colonnes et relations de l'entité.
"""

import enum
import logging
import operator
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel
from sqlalchemy import and_, inspect as sa_inspect, or_
from sqlalchemy.orm import selectinload

logger = logging.getLogger(__name__)

OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}

_GROUP_RE = re.compile(r"(and|or)::(.*?)::\1", re.IGNORECASE | re.DOTALL)
_CLAUSE_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)\s*(==|!=|>=|<=|>|<)\s*(.*?)\s*$", re.DOTALL)


class QuerySyntaxError(ValueError):
    """Texte de requête mal formé."""


class MappingError(ValueError):
    """Champ de la vue sans équivalent (nom ou type) sur l'entité."""


@dataclass(frozen=True)
class Clause:
    field: str
    operator: str
    value: Optional[str]


@dataclass(frozen=True)
class ClauseGroup:
    connector: str  # "and" | "or"
    clauses: Tuple[Clause, ...]


@dataclass(frozen=True)
class DtoQuery:
    groups: Tuple[ClauseGroup, ...]

    @classmethod
    def where(cls, **equals) -> "DtoQuery":
        """Raccourci : égalités combinées par ET, ex. DtoQuery.where(student_code="ST...")."""
        clauses = tuple(
            Clause(field, "==", None if value is None else str(value))
            for field, value in equals.items()
        )
        return cls((ClauseGroup("and", clauses),))

    def fields(self) -> List[str]:
        return [c.field for g in self.groups for c in g.clauses]


QueryLike = Union[str, DtoQuery, None]


def to_snake_case(name: str) -> str:
    """StudentCode / studentCode / student_code -> student_code."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name.strip())
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def _split_outside_quotes(text: str, sep: str = ",") -> List[str]:
    parts, buf, quote = [], [], None
    for ch in text:
        if quote:
            if ch == quote:
                quote = None
            buf.append(ch)
        elif ch in ("'", '"'):
            quote = ch
            buf.append(ch)
        elif ch == sep:
            parts.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    if quote:
        raise QuerySyntaxError("Guillemet non fermé dans la requête.")
    parts.append("".join(buf))
    return [p.strip() for p in parts if p.strip()]


def _parse_clause(text: str) -> Clause:
    match = _CLAUSE_RE.match(text)
    if not match:
        raise QuerySyntaxError(f"Clause invalide : '{text}'.")
    field, op, raw = match.groups()
    if raw == "":
        raise QuerySyntaxError(f"Valeur manquante dans la clause '{text}'.")
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in ("'", '"'):
        value = raw[1:-1]
    elif raw.lower() == "null":
        value = None
    else:
        value = raw
    return Clause(to_snake_case(field), op, value)


def _parse_clauses(text: str) -> Tuple[Clause, ...]:
    clauses = tuple(_parse_clause(part) for part in _split_outside_quotes(text))
    if not clauses:
        raise QuerySyntaxError("Groupe de clauses vide.")
    return clauses


def parse_query(text: QueryLike) -> Optional[DtoQuery]:
    """Analyse le texte de filtrage ; None si aucun filtre n'est fourni."""
    if text is None or isinstance(text, DtoQuery):
        return text
    text = text.strip()
    if not text:
        return None

    groups = []
    remainder = []
    position = 0
    for match in _GROUP_RE.finditer(text):
        remainder.append(text[position:match.start()])
        groups.append(ClauseGroup(match.group(1).lower(), _parse_clauses(match.group(2))))
        position = match.end()
    remainder.append(text[position:])

    leftover = ",".join(part.strip(" ,") for part in remainder if part.strip(" ,"))
    if leftover:
        if "::" in leftover:
            raise QuerySyntaxError(f"Groupe mal délimité : '{leftover}'.")
        groups.append(ClauseGroup("and", _parse_clauses(leftover)))
    return DtoQuery(tuple(groups))


def parse_names(values: Optional[Iterable[str]]) -> List[str]:
    """Aplati les paramètres répétés ou séparés par des virgules (?includes=a&includes=b,c)."""
    names = []
    for value in values or []:
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


def _coerce(value: str, python_type: type) -> Any:
    if python_type is str:
        return value
    if python_type is bool:
        lowered = value.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise ValueError(value)
    if isinstance(python_type, type) and issubclass(python_type, enum.Enum):
        if value.upper() in python_type.__members__:
            return python_type[value.upper()]
        for member in python_type:
            if str(member.value) == value:
                return member
        raise ValueError(value)
    if python_type is datetime:
        return datetime.fromisoformat(value)
    if python_type is date:
        return date.fromisoformat(value)
    if python_type is Decimal:
        try:
            return Decimal(value)
        except InvalidOperation as e:
            raise ValueError(value) from e
    return python_type(value)


class ExpressionMapper:
    """
    Traduit des spécifications exprimées sur une vue (schéma Pydantic) en
    constructions SQLAlchemy exprimées sur l'entité : filtre, chargements
    anticipés (includes) et tri. La correspondance se fait par nom.
    """

    def __init__(self, entity: type, view: Optional[Type[BaseModel]] = None):
        self.entity = entity
        self.view = view
        self._mapper = sa_inspect(entity)

    def _check_view_field(self, name: str) -> None:
        if self.view is not None and name not in self.view.model_fields:
            raise MappingError(f"Le champ '{name}' n'existe pas sur {self.view.__name__}.")

    def _column(self, name: str):
        name = to_snake_case(name)
        self._check_view_field(name)
        if name not in self._mapper.column_attrs:
            raise MappingError(f"Le champ '{name}' n'a pas de colonne correspondante sur {self.entity.__name__}.")
        prop = self._mapper.column_attrs[name]
        return getattr(self.entity, name), prop.columns[0].type

    def _comparison(self, clause: Clause):
        attribute, column_type = self._column(clause.field)
        if clause.value is None:
            if clause.operator == "==":
                return attribute.is_(None)
            if clause.operator == "!=":
                return attribute.is_not(None)
            raise MappingError(f"L'opérateur '{clause.operator}' n'accepte pas null.")
        try:
            python_type = column_type.python_type
        except NotImplementedError:
            python_type = str
        try:
            value = _coerce(clause.value, python_type)
        except (TypeError, ValueError) as e:
            raise MappingError(
                f"La valeur '{clause.value}' n'est pas compatible avec le champ '{clause.field}'."
            ) from e
        return OPERATORS[clause.operator](attribute, value)

    def map_predicate(self, query: QueryLike):
        """Filtre SQLAlchemy équivalent, ou None si la requête est vide."""
        query = parse_query(query)
        if query is None or not query.groups:
            return None
        conditions = []
        for group in query.groups:
            comparisons = [self._comparison(c) for c in group.clauses]
            conditions.append(or_(*comparisons) if group.connector == "or" else and_(*comparisons))
        return and_(*conditions) if len(conditions) > 1 else conditions[0]

    def map_includes(self, names: Optional[Sequence[str]]) -> list:
        """Options selectinload() pour chaque relation demandée (chemins pointés acceptés)."""
        options = []
        for name in parse_names(names):
            path = [to_snake_case(part) for part in name.split(".")]
            self._check_view_field(path[0])
            mapper, loader = self._mapper, None
            for part in path:
                if part not in mapper.relationships:
                    raise MappingError(
                        f"'{part}' n'est pas une relation de {mapper.class_.__name__}."
                    )
                attribute = getattr(mapper.class_, part)
                loader = selectinload(attribute) if loader is None else loader.selectinload(attribute)
                mapper = mapper.relationships[part].mapper
            options.append(loader)
        return options

    def map_order_by(self, names: Optional[Sequence[str]]) -> list:
        """Clauses ORDER BY ; un préfixe '-' demande un tri décroissant."""
        orderings = []
        for name in parse_names(names):
            descending = name.startswith("-")
            attribute, _ = self._column(name.lstrip("-+"))
            orderings.append(attribute.desc() if descending else attribute.asc())
        return orderings
