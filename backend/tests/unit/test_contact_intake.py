import pytest

from orgcms.domain.contact import ContactService, validate_contact
from orgcms.domain.errors import ValidationError
from orgcms.infra.records import CONTACT_MESSAGES


@pytest.fixture
def sample_contact_submission():
	return {
		"name": "  Jane Doe ",
		"email": "jane@example.org",
		"subject": "Membership",
		"message": "I would like to join the organization.",
	}


def test_valid_submission_is_trimmed(sample_contact_submission):
	submission = validate_contact(sample_contact_submission)

	assert submission.name == "Jane Doe"
	assert submission.email == "jane@example.org"
	assert submission.subject == "Membership"


def test_every_failing_field_is_reported_in_order():
	with pytest.raises(ValidationError) as excinfo:
		validate_contact({"name": "Al", "email": "al@", "message": "hi"})

	assert excinfo.value.fields == ["name", "email", "message"]
	reasons = [err.reason for err in excinfo.value.errors]
	assert reasons == [
		"Name must be at least 3 characters",
		"Email address is not valid",
		"Message must be at least 10 characters",
	]


def test_whitespace_padding_does_not_count_toward_length(sample_contact_submission):
	payload = dict(sample_contact_submission, name="  ab  ", message="   short    ")

	with pytest.raises(ValidationError) as excinfo:
		validate_contact(payload)

	assert excinfo.value.fields == ["name", "message"]


@pytest.mark.parametrize(
	"email",
	["plain", "no-at.example.org", "two@@example.org", "space in@example.org", "user@domain"],
)
def test_invalid_emails(sample_contact_submission, email):
	with pytest.raises(ValidationError) as excinfo:
		validate_contact(dict(sample_contact_submission, email=email))

	assert excinfo.value.fields == ["email"]


def test_missing_fields_are_invalid():
	with pytest.raises(ValidationError) as excinfo:
		validate_contact({})

	assert excinfo.value.fields == ["name", "email", "message"]


@pytest.mark.asyncio
async def test_submit_persists_new_message(memory_store, sample_contact_submission):
	doc = await ContactService().submit(sample_contact_submission, ip_address="203.0.113.9")

	stored = await memory_store.find(CONTACT_MESSAGES)
	assert stored.total_docs == 1
	assert stored.docs[0]["id"] == doc["id"]
	assert stored.docs[0]["status"] == "new"
	assert stored.docs[0]["name"] == "Jane Doe"
	assert stored.docs[0]["ipAddress"] == "203.0.113.9"


@pytest.mark.asyncio
async def test_submit_rejects_without_persisting(memory_store):
	with pytest.raises(ValidationError):
		await ContactService().submit({"name": "x", "email": "bad", "message": "short"})

	assert (await memory_store.find(CONTACT_MESSAGES, limit=0)).total_docs == 0
