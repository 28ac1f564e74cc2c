from cloudinary_fs.storage.dto import ErrorKind, ResourceMetadata, Result


def test_result_truthiness_follows_ok():
    assert Result.success([])
    assert not Result.failure(ErrorKind.NOT_FOUND)


def test_result_success_defaults_to_true():
    assert Result.success().value is True


def test_result_failure_carries_kind_and_message():
    result = Result.failure(ErrorKind.DELETE_FAILED, "Remote reported 'not found'")

    assert result.ok is False
    assert result.value is None
    assert result.error == ErrorKind.DELETE_FAILED
    assert result.error.value == "delete_failed"
    assert "not found" in result.message


def test_resource_metadata_keeps_extra_fields():
    metadata = ResourceMetadata(
        path="a", size=1, timestamp=2, mimetype="image/png", width=10
    )
    assert metadata.type == "file"
    assert metadata.model_dump()["width"] == 10
