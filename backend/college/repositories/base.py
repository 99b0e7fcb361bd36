"""
Dépôt générique : accès aux données d'un type d'entité via une session SQLAlchemy.

Aucune exception catalogue ne remonte à l'appelant :
- les écritures renvoient un OperationResult (ou un booléen pour les suppressions) ;
- les lectures renvoient None en cas d'absence ou d'erreur, après journalisation.
"""

import logging
from typing import Generic, Iterable, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from college.core.results import ErrorCode, FailureLevel, OperationResult, OperationStatus, PagedResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    model: Type[T] = None

    def __init__(self, db: Session, model: Optional[Type[T]] = None):
        self.db = db
        self.model = model or self.model
        if self.model is None:
            raise ValueError("Un dépôt doit être associé à une classe d'entité.")

    # --- Écriture ---

    def create(self, entity: T, commit: bool = True) -> OperationResult:
        """Ajoute l'entité ; commit=False se contente d'un flush (unité de travail plus large)."""
        try:
            self.db.add(entity)
            self._save(commit)
            logger.info("%s créé (id=%s)", self.model.__name__, entity.id)
            return OperationResult.success(entity)
        except (SQLAlchemyError, ValueError) as e:
            return self._write_failure(e, ErrorCode.CREATE_FAILED)

    def create_range(self, entities: Iterable[T], commit: bool = True) -> OperationResult:
        entities = list(entities)
        if not entities:
            return OperationResult.failure(ErrorCode.CREATE_NO_CHANGES)
        try:
            self.db.add_all(entities)
            self._save(commit)
            logger.info("%d %s créés", len(entities), self.model.__name__)
            return OperationResult.success(entities)
        except (SQLAlchemyError, ValueError) as e:
            return self._write_failure(e, ErrorCode.CREATE_FAILED)

    def update(self, entity: T, commit: bool = True) -> OperationResult:
        """
        Persiste l'état de l'entité. Une autre instance déjà suivie par la session
        avec le même identifiant est détachée avant de rattacher celle reçue.
        """
        try:
            merged = self._attach(entity)
            self._save(commit)
            return OperationResult.success(merged)
        except (SQLAlchemyError, ValueError) as e:
            return self._write_failure(e, ErrorCode.UPDATE_FAILED)

    def update_range(self, entities: Iterable[T], commit: bool = True) -> OperationResult:
        entities = list(entities)
        if not entities:
            return OperationResult.failure(ErrorCode.UPDATE_NO_CHANGES)
        try:
            merged = [self._attach(e) for e in entities]
            self._save(commit)
            return OperationResult.success(merged)
        except (SQLAlchemyError, ValueError) as e:
            return self._write_failure(e, ErrorCode.UPDATE_FAILED)

    def delete(self, target, commit: bool = True) -> bool:
        """
        Supprime par identifiant, par instance ou par prédicat SQLAlchemy.
        Retourne False si rien ne correspond ou en cas d'erreur.
        Avec commit=False la suppression est seulement envoyée (flush) ; l'appelant valide.
        """
        try:
            if isinstance(target, self.model):
                entities = [target]
            elif isinstance(target, int):
                entity = self.db.get(self.model, target)
                entities = [entity] if entity is not None else []
            else:
                entities = self.db.execute(select(self.model).where(target)).scalars().all()

            if not entities:
                logger.info("Suppression %s : aucun enregistrement pour %r", self.model.__name__, target)
                return False
            for entity in entities:
                self.db.delete(entity)
            self._save(commit)
            logger.info("%d %s supprimé(s)", len(entities), self.model.__name__)
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Échec de suppression %s : %s", self.model.__name__, e, exc_info=True)
            return False

    def delete_range(self, entities: Iterable[T]) -> bool:
        entities = list(entities)
        if not entities:
            return False
        try:
            for entity in entities:
                self.db.delete(entity)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Échec de suppression multiple %s : %s", self.model.__name__, e, exc_info=True)
            return False

    # --- Lecture ---

    def query(self, predicate=None, includes: Optional[Sequence] = None, order_by: Optional[Sequence] = None):
        """Requête SELECT de base, filtrée, avec chargements anticipés et tri."""
        stmt = select(self.model)
        if includes:
            stmt = stmt.options(*includes)
        if predicate is not None:
            stmt = stmt.where(predicate)
        if order_by:
            stmt = stmt.order_by(*order_by)
        return stmt

    def get(self, entity_id: int, includes: Optional[Sequence] = None) -> Optional[T]:
        try:
            if not includes:
                entity = self.db.get(self.model, entity_id)
            else:
                entity = self.db.execute(
                    self.query(self.model.id == entity_id, includes)
                ).scalars().first()
        except SQLAlchemyError as e:
            logger.error("Lecture %s id=%s impossible : %s", self.model.__name__, entity_id, e, exc_info=True)
            return None
        if entity is None:
            logger.info("%s introuvable (id=%s)", self.model.__name__, entity_id)
        return entity

    def get_where(self, predicate, includes: Optional[Sequence] = None) -> Optional[T]:
        try:
            entity = self.db.execute(self.query(predicate, includes).limit(1)).scalars().first()
        except SQLAlchemyError as e:
            logger.error("Lecture %s par prédicat impossible : %s", self.model.__name__, e, exc_info=True)
            return None
        if entity is None:
            logger.info("%s introuvable pour le prédicat donné", self.model.__name__)
        return entity

    def get_all(
        self,
        predicate=None,
        includes: Optional[Sequence] = None,
        order_by: Optional[Sequence] = None,
    ) -> Optional[List[T]]:
        """Liste (éventuellement vide) des entités ; None si la lecture a échoué."""
        try:
            return list(self.db.execute(self.query(predicate, includes, order_by)).scalars().all())
        except SQLAlchemyError as e:
            logger.error("Lecture de la liste %s impossible : %s", self.model.__name__, e, exc_info=True)
            return None

    def get_all_paged(
        self,
        page_number: int,
        page_size: int,
        predicate=None,
        includes: Optional[Sequence] = None,
        order_by: Optional[Sequence] = None,
    ) -> Optional[PagedResult]:
        """Une page d'entités ; None si la lecture a échoué."""
        page_number = max(page_number, 1)
        page_size = max(page_size, 1)
        try:
            total = self.count(predicate, raise_errors=True)
            stmt = self.query(predicate, includes, order_by or [self.model.id.asc()])
            items = self.db.execute(
                stmt.offset((page_number - 1) * page_size).limit(page_size)
            ).scalars().all()
        except SQLAlchemyError as e:
            logger.error("Lecture paginée %s impossible : %s", self.model.__name__, e, exc_info=True)
            return None
        return PagedResult(
            items=list(items),
            total_count=total,
            page_size=page_size,
            current_page=page_number,
        )

    def exists(self, predicate=None) -> bool:
        try:
            return bool(self.db.execute(select(self.query(predicate).exists())).scalar())
        except SQLAlchemyError as e:
            logger.error("Test d'existence %s impossible : %s", self.model.__name__, e, exc_info=True)
            return False

    def count(self, predicate=None, raise_errors: bool = False) -> int:
        try:
            return self.db.execute(
                select(func.count()).select_from(self.query(predicate).subquery())
            ).scalar_one()
        except SQLAlchemyError as e:
            if raise_errors:
                raise
            logger.error("Comptage %s impossible : %s", self.model.__name__, e, exc_info=True)
            return 0

    # --- Interne ---

    def _save(self, commit: bool) -> None:
        if commit:
            self.db.commit()
        else:
            self.db.flush()

    def _attach(self, entity: T) -> T:
        key = self.db.identity_key(self.model, entity.id)
        local = self.db.identity_map.get(key)
        if local is not None and local is not entity:
            self.db.expunge(local)
        return self.db.merge(entity)

    def _write_failure(self, error: Exception, code: ErrorCode) -> OperationResult:
        self.db.rollback()
        logger.error("Échec d'écriture %s : %s", self.model.__name__, error, exc_info=True)
        result = OperationResult(OperationStatus.FAILURE)
        if isinstance(error, IntegrityError):
            return result.with_error_code(ErrorCode.DUPLICATE_RECORD, level=FailureLevel.IMPORTANT)
        if isinstance(error, ValueError):
            return result.with_error_code(ErrorCode.VALIDATION_FAILED, str(error), FailureLevel.IMPORTANT)
        return result.with_error_code(code, level=FailureLevel.CRITICAL).with_exception(error)
