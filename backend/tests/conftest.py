"""Shared test fixtures and configuration for backend tests."""
import pytest
from fastapi.testclient import TestClient

from fileshare.files.service import FileStorageService, get_file_service
from fileshare.main import app


@pytest.fixture
def storage_service(tmp_path):
    """Inject a storage service rooted in a temp directory.

    Every request handled by the app during the test sees this service, so
    uploads never touch the working directory and the registry starts empty.
    """
    service = FileStorageService(upload_dir=str(tmp_path / "uploads"))
    app.dependency_overrides[get_file_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_file_service, None)
    FileStorageService.reset_instance()


@pytest.fixture
def api_client(storage_service):
    """Provide a TestClient for the main FastAPI app backed by a temp store."""
    return TestClient(app)
