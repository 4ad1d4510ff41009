from __future__ import annotations

from collections import defaultdict

from taxonomy_admin.schemas.taxonomy import (
    CategoryNode,
    CategoryRow,
    DeleteConfirmationResponse,
    EntityKind,
    SubcategoryNode,
    SubcategoryRow,
    TaxonomySnapshot,
)
from taxonomy_admin.services.errors import ValidationError

KIND_LABELS: dict[EntityKind, str] = {
    EntityKind.CATEGORY: "Category",
    EntityKind.SUBCATEGORY: "Subcategory",
}


def clean_taxonomy_name(name: str | None) -> str:
    return str(name or "").strip()


def validate_taxonomy_name(kind: EntityKind, name: str | None) -> str:
    cleaned = clean_taxonomy_name(name)
    if not cleaned:
        raise ValidationError(f"{KIND_LABELS[kind]} name cannot be empty.")
    return cleaned


def build_taxonomy_tree(
    categories: list[CategoryRow],
    subcategories: list[SubcategoryRow],
) -> tuple[TaxonomySnapshot, int]:
    """Group subcategory rows under their parent category.

    Both inputs keep the order the store returned them in. Subcategories whose
    ``category_id`` does not match a fetched category are dropped; their count
    is returned alongside the snapshot.
    """
    known_ids = {category.id for category in categories}
    grouped: dict[str, list[SubcategoryNode]] = defaultdict(list)
    orphaned = 0
    for subcategory in subcategories:
        if subcategory.category_id not in known_ids:
            orphaned += 1
            continue
        grouped[subcategory.category_id].append(
            SubcategoryNode(
                id=subcategory.id,
                name=subcategory.name,
                category_id=subcategory.category_id,
            )
        )

    snapshot = TaxonomySnapshot(
        categories=tuple(
            CategoryNode(
                id=category.id,
                name=category.name,
                subcategories=tuple(grouped.get(category.id, [])),
            )
            for category in categories
        )
    )
    return snapshot, orphaned


def delete_confirmation(
    kind: EntityKind, entity: CategoryNode | SubcategoryNode
) -> DeleteConfirmationResponse:
    label = KIND_LABELS[kind].lower()
    message = f'Are you sure you want to delete the {label} "{entity.name}"? This action cannot be undone.'
    if kind == EntityKind.CATEGORY:
        message += " All of its subcategories will also be deleted."
    return DeleteConfirmationResponse(title="Confirm deletion", message=message)
