from taxonomy_admin.models.category import Category, Subcategory

__all__ = [
    "Category",
    "Subcategory",
]
