import pytest
from pydantic import ValidationError

from portal.settings import Settings


def test_urgent_category_is_normalised(monkeypatch):
	monkeypatch.setenv("URGENT_NOTICE_CATEGORY", " lost & found ")

	assert Settings().urgent_notice_category == "Lost & Found"


def test_unknown_urgent_category_is_rejected(monkeypatch):
	monkeypatch.setenv("URGENT_NOTICE_CATEGORY", "Emergency")

	with pytest.raises(ValidationError) as excinfo:
		Settings()
	assert "URGENT_NOTICE_CATEGORY must be one of" in str(excinfo.value)


def test_cors_origins_split_from_comma_list(monkeypatch):
	monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://portal.example, ,http://localhost:5173")

	assert Settings().cors_allow_origins == ("https://portal.example", "http://localhost:5173")
