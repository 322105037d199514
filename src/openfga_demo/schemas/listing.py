"""Listing response schemas."""

from pydantic import BaseModel, Field


class ListObjectsResponse(BaseModel):
    """Objects a user holds a relation to."""

    objects: list[str] = Field(default_factory=list, description="Object ids in 'type:id' format")
    total_count: int
    object_type: str
    relation: str


class SharedService(BaseModel):
    id: str
    name: str
    shared_via: str
    permissions: list[str]


class SharedServiceType(BaseModel):
    id: str
    service_name: str
    service_type: str
    shared_via: str
    permissions: list[str]


class SharedResource(BaseModel):
    id: str
    service_name: str
    service_type: str
    org_id: str
    resource_name: str
    shared_via: str
    permissions: list[str]


class SharedResourcesResponse(BaseModel):
    """Everything a user can reach, grouped by level of the hierarchy."""

    services: list[SharedService] = Field(default_factory=list)
    service_types: list[SharedServiceType] = Field(default_factory=list)
    resources: list[SharedResource] = Field(default_factory=list)
