"""
Service générique : CRUD et lectures paginées exprimés en termes de vues (schémas Pydantic).

Chaque opération :
1. traduit le filtre / les includes / le tri exprimés sur la vue en constructions
   SQLAlchemy sur l'entité (ExpressionMapper) ;
2. délègue au dépôt ;
3. convertit les entités obtenues dans la vue demandée.

Le résultat est toujours un OperationResult (donnée dans `result.data`) ;
`last_result` garde le dernier, l'instance de service vivant le temps d'une requête.
"""

import logging
from typing import Generic, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from college.config import settings
from college.core.query import ExpressionMapper, MappingError, QueryLike, QuerySyntaxError
from college.core.results import ErrorCode, FailureLevel, OperationResult, OperationStatus, PagedResult
from college.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

QUERY_ERRORS = (MappingError, QuerySyntaxError)


class Service(Generic[T]):
    model: Type[T] = None
    default_view: Type[BaseModel] = None

    def __init__(self, db: Session, repository: Optional[BaseRepository] = None):
        self.db = db
        self.repository = repository or BaseRepository(db, self.model)
        self._last_result = OperationResult()

    @property
    def last_result(self) -> OperationResult:
        return self._last_result

    # --- Correspondance DTO <-> entité (surchargées par les services concrets) ---

    def to_entity(self, dto: BaseModel) -> T:
        return self.model(**dto.model_dump(exclude_none=True))

    def merge(self, entity: T, dto: BaseModel) -> T:
        """Applique les champs fournis du DTO ; les champs absents ne sont pas modifiés."""
        for field, value in dto.model_dump(exclude_unset=True, exclude={"id"}).items():
            setattr(entity, field, value)
        return entity

    def to_view(self, entity: T, view: Optional[Type[BaseModel]] = None) -> BaseModel:
        return (view or self.default_view).model_validate(entity)

    def mapper(self, view: Optional[Type[BaseModel]] = None) -> ExpressionMapper:
        return ExpressionMapper(self.model, view or self.default_view)

    # --- Écriture ---

    def create(
        self,
        dto: Union[BaseModel, Sequence[BaseModel]],
        view: Optional[Type[BaseModel]] = None,
    ) -> OperationResult:
        """Crée une entité (ou plusieurs si une liste est fournie)."""
        many = isinstance(dto, (list, tuple))
        try:
            entities = [self.to_entity(d) for d in dto] if many else [self.to_entity(dto)]
        except ValueError as e:
            return self._done(OperationResult.failure(ErrorCode.VALIDATION_FAILED, str(e)))

        if many:
            result = self.repository.create_range(entities)
        else:
            result = self.repository.create(entities[0])
        if result.is_failure:
            return self._done(result)

        try:
            views = [self.to_view(e, view) for e in entities]
        except ValidationError as e:
            return self._done(self._read_failure(e))
        return self._done(OperationResult.success(views if many else views[0]))

    def update(self, entity_id: int, dto: BaseModel, view: Optional[Type[BaseModel]] = None) -> OperationResult:
        entity = self.repository.get(entity_id)
        if entity is None:
            return self._done(self._not_found())
        return self._update_entity(entity, dto, view)

    def delete(self, entity_id: int) -> OperationResult:
        if not self.repository.exists(self.model.id == entity_id):
            return self._done(self._not_found())
        if not self.repository.delete(entity_id):
            return self._done(OperationResult.failure(ErrorCode.DELETE_FAILED, level=FailureLevel.CRITICAL))
        return self._done(OperationResult.success())

    # --- Lecture ---

    def get(
        self,
        entity_id: int,
        view: Optional[Type[BaseModel]] = None,
        includes: Optional[Sequence[str]] = None,
    ) -> OperationResult:
        try:
            options = self.mapper(view).map_includes(includes)
        except QUERY_ERRORS as e:
            return self._done(self._invalid_query(e))
        entity = self.repository.get(entity_id, options)
        if entity is None:
            return self._done(self._not_found())
        return self._done(self._single(entity, view))

    def get_where(
        self,
        query: QueryLike,
        view: Optional[Type[BaseModel]] = None,
        includes: Optional[Sequence[str]] = None,
    ) -> OperationResult:
        """Première entité correspondant au filtre exprimé sur la vue."""
        try:
            mapper = self.mapper(view)
            predicate = mapper.map_predicate(query)
            options = mapper.map_includes(includes)
        except QUERY_ERRORS as e:
            return self._done(self._invalid_query(e))
        if predicate is None:
            return self._done(OperationResult.failure(ErrorCode.INVALID_REQUEST, "Un filtre est requis."))
        entity = self.repository.get_where(predicate, options)
        if entity is None:
            return self._done(self._not_found())
        return self._done(self._single(entity, view))

    def get_all(
        self,
        view: Optional[Type[BaseModel]] = None,
        query: QueryLike = None,
        includes: Optional[Sequence[str]] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> OperationResult:
        """Liste complète (vide acceptée) dans la vue demandée."""
        try:
            mapper = self.mapper(view)
            predicate = mapper.map_predicate(query)
            options = mapper.map_includes(includes)
            orderings = mapper.map_order_by(order_by)
        except QUERY_ERRORS as e:
            return self._done(self._invalid_query(e))

        entities = self.repository.get_all(predicate, options, orderings)
        if entities is None:
            return self._done(OperationResult.failure(ErrorCode.READ_FAILED, level=FailureLevel.CRITICAL))
        try:
            return self._done(OperationResult.success([self.to_view(e, view) for e in entities]))
        except ValidationError as e:
            return self._done(self._read_failure(e))

    def get_all_paged(
        self,
        page_number: int = 1,
        page_size: Optional[int] = None,
        view: Optional[Type[BaseModel]] = None,
        query: QueryLike = None,
        includes: Optional[Sequence[str]] = None,
        order_by: Optional[Sequence[str]] = None,
    ) -> OperationResult:
        """
        Une page de résultats. Une page sans élément est un échec NOT_FOUND
        (et non une page vide réussie) ; la page vide reste dans `data`.
        """
        page_size = min(page_size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        try:
            mapper = self.mapper(view)
            predicate = mapper.map_predicate(query)
            options = mapper.map_includes(includes)
            orderings = mapper.map_order_by(order_by)
        except QUERY_ERRORS as e:
            return self._done(self._invalid_query(e))

        logger.debug(
            "Page %s de %s (filtre=%s, includes=%d, tri=%d)",
            page_number, self.model.__name__, predicate is not None, len(options), len(orderings),
        )
        page = self.repository.get_all_paged(page_number, page_size, predicate, options, orderings)
        if page is None:
            return self._done(OperationResult.failure(ErrorCode.READ_FAILED, level=FailureLevel.CRITICAL))
        if not page.items:
            empty = PagedResult(items=[], total_count=page.total_count,
                                page_size=page.page_size, current_page=page.current_page)
            return self._done(OperationResult.failure(ErrorCode.NOT_FOUND).with_data(empty))
        try:
            return self._done(OperationResult.success(page.map(lambda e: self.to_view(e, view))))
        except ValidationError as e:
            return self._done(self._read_failure(e))

    def exists(self, query: QueryLike = None, entity_id: Optional[int] = None) -> OperationResult:
        """data = booléen ; aucune entité n'est matérialisée."""
        try:
            predicate = self.mapper().map_predicate(query)
        except QUERY_ERRORS as e:
            return self._done(self._invalid_query(e))
        if entity_id is not None:
            id_clause = self.model.id == entity_id
            predicate = id_clause if predicate is None else (predicate & id_clause)
        return self._done(OperationResult.success(self.repository.exists(predicate)))

    def count(self, query: QueryLike = None) -> OperationResult:
        try:
            predicate = self.mapper().map_predicate(query)
        except QUERY_ERRORS as e:
            return self._done(self._invalid_query(e))
        return self._done(OperationResult.success(self.repository.count(predicate)))

    # --- Interne ---

    def _update_entity(self, entity: T, dto: BaseModel, view: Optional[Type[BaseModel]]) -> OperationResult:
        try:
            self.merge(entity, dto)
        except ValueError as e:
            self.db.rollback()
            return self._done(OperationResult.failure(ErrorCode.VALIDATION_FAILED, str(e)))

        result = self.repository.update(entity)
        if result.is_failure:
            return self._done(result.with_error_code(ErrorCode.UPDATE_FAILED))
        return self._done(self._single(result.data, view))

    def _single(self, entity: T, view: Optional[Type[BaseModel]]) -> OperationResult:
        try:
            return OperationResult.success(self.to_view(entity, view))
        except ValidationError as e:
            return self._read_failure(e)

    def _not_found(self) -> OperationResult:
        return OperationResult.failure(
            ErrorCode.NOT_FOUND, f"{self.model.__name__} introuvable.", FailureLevel.IMPORTANT
        )

    def _invalid_query(self, error: Exception) -> OperationResult:
        logger.warning("Requête invalide sur %s : %s", self.model.__name__, error)
        return OperationResult.failure(ErrorCode.INVALID_REQUEST, str(error))

    def _read_failure(self, error: Exception) -> OperationResult:
        logger.error("Conversion %s vers la vue impossible : %s", self.model.__name__, error)
        return OperationResult(OperationStatus.FAILURE).with_error_code(
            ErrorCode.READ_FAILED, level=FailureLevel.CRITICAL
        ).with_exception(error)

    def _done(self, result: OperationResult) -> OperationResult:
        self._last_result = result
        return result

    @staticmethod
    def views(result: OperationResult) -> List[BaseModel]:
        return result.data if result.is_success and result.data else []
