import pytest

from file_server.app.services.path_validator import validate_resource_name
from file_server.exceptions import PathValidationError


@pytest.mark.parametrize(
    "raw_path, expected",
    [
        ("/small.png", "small.png"),
        (b"/small.png", "small.png"),
        ("/my%20file.txt", "my file.txt"),
        ("/%C3%A9t%C3%A9.txt", "été.txt"),
        ("/.hidden", ".hidden"),
        # Decoded exactly once
        ("/a%252Fb", "a%2Fb"),
    ],
)
def test_valid_names(raw_path, expected):
    assert validate_resource_name(raw_path) == expected


@pytest.mark.parametrize(
    "raw_path",
    [
        "/nested/path",
        "//small.png",
        "/a%2Fb",
        "/a%2fb",
        "/..",
        "/%2E%2E",
        "/%2e%2e%2fetc%2fpasswd",
        "/foo..bar",
    ],
)
def test_nested_paths_are_rejected(raw_path):
    with pytest.raises(PathValidationError) as exc_info:
        validate_resource_name(raw_path)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Nested paths are not allowed"


@pytest.mark.parametrize("raw_path", ["", "/", "/a%00b", "/%FF"])
def test_malformed_names_are_rejected(raw_path):
    with pytest.raises(PathValidationError) as exc_info:
        validate_resource_name(raw_path)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Bad request"
