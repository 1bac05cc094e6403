# waste_tracker/schemas/common.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models use camelCase keys; snake_case is accepted on input too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    success: bool = Field(False, description="Always false for errors")
    error: str = Field(description="Error message")

    model_config = {
        "json_schema_extra": {"examples": [{"success": False, "error": "Report not found"}]}
    }


class MessageResponse(BaseModel):
    success: bool = Field(description="Always true on success")
    message: str

    model_config = {
        "json_schema_extra": {
            "examples": [{"success": True, "message": "Report deleted successfully"}]
        }
    }


class OkResponse(BaseModel):
    ok: bool = Field(description="Always true")

    model_config = {"json_schema_extra": {"examples": [{"ok": True}]}}
