from enum import Enum

from pydantic import BaseModel


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    STORE_FAILURE = "store_failure"


class CommandAction(str, Enum):
    CREATE_CATEGORY = "create_category"
    UPDATE_CATEGORY = "update_category"
    DELETE_CATEGORY = "delete_category"
    CREATE_SUBCATEGORY = "create_subcategory"
    UPDATE_SUBCATEGORY = "update_subcategory"
    DELETE_SUBCATEGORY = "delete_subcategory"
    REFRESH = "refresh"


class Outcome(BaseModel):
    status: OutcomeStatus
    action: CommandAction
    message: str
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS
