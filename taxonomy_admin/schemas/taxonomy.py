from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from taxonomy_admin.schemas.outcome import Outcome


class EntityKind(str, Enum):
    CATEGORY = "category"
    SUBCATEGORY = "subcategory"


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class CategoryRow(BaseModel):
    id: str
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class SubcategoryRow(BaseModel):
    id: str
    name: str
    category_id: str | None = None

    @field_validator("id", "category_id", mode="before")
    @classmethod
    def coerce_ids(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class SubcategoryNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category_id: str


class CategoryNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    subcategories: tuple[SubcategoryNode, ...] = ()

    @computed_field
    @property
    def subcategory_count(self) -> int:
        return len(self.subcategories)


class TaxonomySnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    categories: tuple[CategoryNode, ...] = ()

    def find_category(self, category_id: str) -> CategoryNode | None:
        return next((item for item in self.categories if item.id == category_id), None)

    def find_subcategory(self, subcategory_id: str) -> SubcategoryNode | None:
        for category in self.categories:
            for subcategory in category.subcategories:
                if subcategory.id == subcategory_id:
                    return subcategory
        return None

    @property
    def category_ids(self) -> set[str]:
        return {item.id for item in self.categories}


class FormState(BaseModel):
    open: bool = False
    mode: FormMode = FormMode.CREATE
    kind: EntityKind = EntityKind.CATEGORY
    name_input: str = ""
    target_id: str | None = None
    parent_id: str | None = None


class CategoryViewItem(CategoryNode):
    expanded: bool = False


class TaxonomyView(BaseModel):
    categories: list[CategoryViewItem]
    loading: bool
    form: FormState
    outcomes: list[Outcome] = Field(default_factory=list)


class FormCreateRequest(BaseModel):
    kind: EntityKind
    parent_id: str | None = None


class FormEditRequest(BaseModel):
    kind: EntityKind
    id: str = Field(min_length=1)


class FormNameRequest(BaseModel):
    name: str = Field(max_length=120)


class DeleteConfirmationResponse(BaseModel):
    title: str
    message: str
