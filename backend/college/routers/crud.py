"""
Routes CRUD communes aux ressources gérées par un Service générique.

    GET    {prefix}/GetAll?query=&includes=&order_by=
    GET    {prefix}/Get/{id}?includes=
    GET    {prefix}/GetQuery?query=&includes=
    GET    {prefix}?page=&page_size=&query=&includes=&order_by=
    POST   {prefix}            (201)
    POST   {prefix}/Range      (201, création multiple)
    PUT    {prefix}
    DELETE {prefix}/{id}
"""

from typing import List, Optional, Type

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from college.database import get_db
from college.routers.responses import to_response
from college.schemas.common import ApiResponse
from college.security import AppPolicies, require_policy
from college.services.base import Service


def build_crud_router(
    prefix: str,
    tag: str,
    service_class: Type[Service],
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    read_policy: str = AppPolicies.ANY_ROLE,
    write_policy: str = AppPolicies.ADMIN_ONLY,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])
    readers = [Depends(require_policy(read_policy))]
    writers = [Depends(require_policy(write_policy))]
    label = tag.lower()

    @router.get("/GetAll", response_model=ApiResponse, dependencies=readers, summary=f"Lister ({label})")
    def get_all(
        query: Optional[str] = None,
        includes: Optional[List[str]] = Query(None),
        order_by: Optional[List[str]] = Query(None),
        db: Session = Depends(get_db),
    ):
        return to_response(service_class(db).get_all(query=query, includes=includes, order_by=order_by))

    @router.get("/Get/{entity_id}", response_model=ApiResponse, dependencies=readers, summary=f"Détail ({label})")
    def get_one(
        entity_id: int,
        includes: Optional[List[str]] = Query(None),
        db: Session = Depends(get_db),
    ):
        return to_response(service_class(db).get(entity_id, includes=includes))

    @router.get("/GetQuery", response_model=ApiResponse, dependencies=readers, summary=f"Recherche ({label})")
    def get_where(
        query: str,
        includes: Optional[List[str]] = Query(None),
        db: Session = Depends(get_db),
    ):
        return to_response(service_class(db).get_where(query, includes=includes))

    @router.get("", response_model=ApiResponse, dependencies=readers, summary=f"Page ({label})")
    def get_page(
        page: int = Query(1, ge=1),
        page_size: Optional[int] = Query(None, ge=1),
        query: Optional[str] = None,
        includes: Optional[List[str]] = Query(None),
        order_by: Optional[List[str]] = Query(None),
        db: Session = Depends(get_db),
    ):
        return to_response(
            service_class(db).get_all_paged(page, page_size, query=query, includes=includes, order_by=order_by)
        )

    @router.post("", response_model=ApiResponse, status_code=201, dependencies=writers, summary=f"Créer ({label})")
    def create(data: create_schema, db: Session = Depends(get_db)):
        return to_response(service_class(db).create(data), 201)

    @router.post(
        "/Range", response_model=ApiResponse, status_code=201, dependencies=writers,
        summary=f"Créer plusieurs ({label})",
    )
    def create_range(data: List[create_schema], db: Session = Depends(get_db)):
        return to_response(service_class(db).create(data), 201)

    @router.put("", response_model=ApiResponse, dependencies=writers, summary=f"Modifier ({label})")
    def update(data: update_schema, db: Session = Depends(get_db)):
        return to_response(service_class(db).update(data.id, data))

    @router.delete("/{entity_id}", response_model=ApiResponse, dependencies=writers, summary=f"Supprimer ({label})")
    def delete(entity_id: int, db: Session = Depends(get_db)):
        return to_response(service_class(db).delete(entity_id))

    return router
