import json
import logging

from orgcms.obs import logging as obs_logging


def _record(**extra):
	record = logging.LogRecord("orgcms.test", logging.INFO, __file__, 1, "contact_submitted", None, None)
	for key, value in extra.items():
		setattr(record, key, value)
	return record


def test_formatter_emits_json_with_request_context():
	token = obs_logging.bind_context(request_id="req-1", route="/api/public/contact", client_ip="203.0.113.9")
	try:
		line = obs_logging.JSONLogFormatter().format(_record(contact_id="c1"))
	finally:
		obs_logging.reset_context(token)

	payload = json.loads(line)
	assert payload["msg"] == "contact_submitted"
	assert payload["level"] == "info"
	assert payload["request_id"] == "req-1"
	assert payload["ip"] == "203.0.113.9"
	assert payload["contact_id"] == "c1"


def test_formatter_redacts_personal_fields():
	line = obs_logging.JSONLogFormatter().format(
		_record(email="jane@example.org", phone="+62 812", details={"authorization": "Bearer x", "count": 2})
	)

	payload = json.loads(line)
	assert payload["email"] == "[redacted]"
	assert payload["phone"] == "[redacted]"
	assert payload["details"] == {"authorization": "[redacted]", "count": 2}


def test_context_is_cleared_after_reset():
	token = obs_logging.bind_context(request_id="req-2")
	obs_logging.reset_context(token)

	assert obs_logging.current_request_id() is None


def test_nested_bind_layers_over_outer_context():
	outer = obs_logging.bind_context(request_id="req-3", route="/api/public/posts")
	inner = obs_logging.bind_context(route="/api/public/posts/hello", user_id="u1")
	try:
		payload = json.loads(obs_logging.JSONLogFormatter().format(_record()))
	finally:
		obs_logging.reset_context(inner)

	assert payload["request_id"] == "req-3"
	assert payload["route"] == "/api/public/posts/hello"
	assert payload["user_id"] == "u1"
	after = json.loads(obs_logging.JSONLogFormatter().format(_record()))
	obs_logging.reset_context(outer)
	assert after["route"] == "/api/public/posts"
	assert "user_id" not in after
