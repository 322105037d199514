"""Resource request/response schemas."""

from pydantic import BaseModel, Field


class ResourceCreatedResponse(BaseModel):
    message: str
    organisation: str
    resource_id: str


class ResourceResponse(BaseModel):
    resource_id: str = Field(description="Resource key in 'service/type/org/name' format")
    name: str
    service_name: str
    service_type: str
    org_id: str


class ResourceActionResponse(BaseModel):
    """Response after updating or deleting a resource."""

    message: str
    resource_id: str


class ErrorDetail(BaseModel):
    error: str
    message: str
