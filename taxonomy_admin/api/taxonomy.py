from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from taxonomy_admin.api.deps import get_workspace
from taxonomy_admin.schemas.taxonomy import (
    CategoryNode,
    DeleteConfirmationResponse,
    EntityKind,
    FormCreateRequest,
    FormEditRequest,
    FormNameRequest,
    SubcategoryNode,
    TaxonomyView,
)
from taxonomy_admin.services.taxonomy_service import delete_confirmation
from taxonomy_admin.services.workspace import TaxonomyWorkspace

router = APIRouter(prefix="/taxonomy", tags=["taxonomy"])


def _find_entity(
    workspace: TaxonomyWorkspace,
    *,
    kind: EntityKind,
    entity_id: str,
) -> CategoryNode | SubcategoryNode:
    snapshot = workspace.cache.snapshot
    if kind == EntityKind.CATEGORY:
        entity = snapshot.find_category(entity_id)
    else:
        entity = snapshot.find_subcategory(entity_id)
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{kind.value.capitalize()} not found.",
        )
    return entity


@router.get("", response_model=TaxonomyView)
async def get_taxonomy(
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    return workspace.view()


@router.post("/refresh", response_model=TaxonomyView)
async def refresh_taxonomy(
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    await workspace.commands.refresh()
    return workspace.view()


@router.post("/categories/{category_id}/toggle", response_model=TaxonomyView)
async def toggle_category(
    category_id: str,
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    workspace.expansion.toggle(category_id)
    return workspace.view()


@router.post("/form/create", response_model=TaxonomyView)
async def open_create_form(
    payload: FormCreateRequest,
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    workspace.form.open_for_create(payload.kind, payload.parent_id)
    return workspace.view()


@router.post("/form/edit", response_model=TaxonomyView)
async def open_edit_form(
    payload: FormEditRequest,
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    entity = _find_entity(workspace, kind=payload.kind, entity_id=payload.id)
    workspace.form.open_for_edit(payload.kind, entity)
    return workspace.view()


@router.put("/form/name", response_model=TaxonomyView)
async def set_form_name(
    payload: FormNameRequest,
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    if not workspace.form.is_open:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No form is open.",
        )
    workspace.form.set_name(payload.name)
    return workspace.view()


@router.post("/form/submit", response_model=TaxonomyView)
async def submit_form(
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    if not workspace.form.is_open:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No form is open.",
        )
    await workspace.form.submit()
    return workspace.view()


@router.post("/form/cancel", response_model=TaxonomyView)
async def cancel_form(
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    workspace.form.cancel()
    return workspace.view()


@router.delete("/categories/{category_id}", response_model=TaxonomyView)
async def delete_category(
    category_id: str,
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    outcome = await workspace.commands.delete_category(category_id)
    if outcome.ok:
        workspace.expansion.prune(workspace.cache.snapshot.category_ids)
    return workspace.view()


@router.delete("/subcategories/{subcategory_id}", response_model=TaxonomyView)
async def delete_subcategory(
    subcategory_id: str,
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> TaxonomyView:
    await workspace.commands.delete_subcategory(subcategory_id)
    return workspace.view()


@router.get("/{kind}/{entity_id}/delete-confirmation", response_model=DeleteConfirmationResponse)
async def get_delete_confirmation(
    kind: EntityKind,
    entity_id: str,
    workspace: TaxonomyWorkspace = Depends(get_workspace),
) -> DeleteConfirmationResponse:
    entity = _find_entity(workspace, kind=kind, entity_id=entity_id)
    return delete_confirmation(kind, entity)
