import json
import logging

from portal.obs import logging as obs_logging


def _record(**extra) -> logging.LogRecord:
	record = logging.LogRecord("portal.test", logging.INFO, __file__, 10, "feed_built", None, None)
	for key, value in extra.items():
		setattr(record, key, value)
	return record


def test_formatter_emits_json_with_bound_context():
	tokens = obs_logging.bind_context(request_id="req-42", route="/feed", user_id="u1")
	try:
		line = obs_logging.JSONLogFormatter().format(_record(items=6))
	finally:
		obs_logging.reset_context(tokens)

	payload = json.loads(line)
	assert payload["msg"] == "feed_built"
	assert payload["level"] == "info"
	assert payload["request_id"] == "req-42"
	assert payload["route"] == "/feed"
	assert payload["user_id"] == "u1"
	assert payload["items"] == 6
	assert obs_logging.current_request_id() is None


def test_formatter_redacts_sensitive_fields():
	line = obs_logging.JSONLogFormatter().format(
		_record(auth_token="abc", audit={"actor_id": "u1", "email": "a@b.c"})
	)

	payload = json.loads(line)
	assert payload["auth_token"] == "[redacted]"
	assert payload["audit"] == {"actor_id": "u1", "email": "[redacted]"}


def test_sampling_filter_keeps_warnings(monkeypatch):
	monkeypatch.setattr(obs_logging.settings, "obs_log_sampling_rate_info", 0.0)
	sampler = obs_logging.InfoSamplingFilter()

	warning = logging.LogRecord("portal", logging.WARNING, __file__, 1, "w", None, None)
	info = logging.LogRecord("portal", logging.INFO, __file__, 1, "i", None, None)

	assert sampler.filter(warning) is True
	assert sampler.filter(info) is False
