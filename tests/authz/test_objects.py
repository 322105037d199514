"""Tests for object identifier helpers."""

import pytest

from openfga_demo.authz.objects import (
    ResourceKey,
    format_user,
    parse_resource,
    parse_service,
    parse_service_type,
    split_object,
)


def test_format_user() -> None:
    assert format_user("alice") == "user:alice"
    assert format_user("user:alice") == "user:alice"
    assert format_user("organisation:partner#member") == "organisation:partner#member"


def test_split_object() -> None:
    assert split_object("service_type:connector/s3") == ("service_type", "connector/s3")

    for bad in ("connector", ":connector", "service:"):
        with pytest.raises(ValueError):
            split_object(bad)


def test_resource_key_objects() -> None:
    key = ResourceKey("connector", "s3", "system", "bucket-a")

    assert key.key == "connector/s3/system/bucket-a"
    assert key.object == "resource:connector/s3/system/bucket-a"
    assert key.service_type_object == "service_type:connector/s3"
    assert key.organisation_object == "organisation:system"


@pytest.mark.parametrize(
    "obj, expected",
    [
        ("service:connector", "connector"),
        ("service:connector/s3", None),
        ("service_type:connector", None),
        ("service:", None),
    ],
)
def test_parse_service(obj: str, expected) -> None:
    assert parse_service(obj) == expected


@pytest.mark.parametrize(
    "obj, expected",
    [
        ("service_type:connector/s3", ("connector", "s3")),
        ("service_type:connector", None),
        ("service_type:connector/s3/extra", None),
        ("service_type:/s3", None),
        ("service:connector/s3", None),
    ],
)
def test_parse_service_type(obj: str, expected) -> None:
    assert parse_service_type(obj) == expected


def test_parse_resource() -> None:
    assert parse_resource("resource:connector/gcs/system/401") == ResourceKey(
        "connector", "gcs", "system", "401"
    )
    assert parse_resource("resource:connector/gcs/401") is None
    assert parse_resource("resource:connector/gcs/system/") is None
    assert parse_resource("service:connector/gcs/system/401") is None
