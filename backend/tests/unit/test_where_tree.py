import pytest

from orgcms.infra import where


def test_and_drops_empty_clauses():
	assert where.and_(None, {}, where.equals("status", "published")) == {"status": {"equals": "published"}}
	assert where.and_(None, {}) is None
	combined = where.and_(where.equals("a", 1), where.equals("b", 2))
	assert combined == {"and": [{"a": {"equals": 1}}, {"b": {"equals": 2}}]}


def test_equals_compares_expanded_relation_by_id():
	doc = {"position": {"id": "pos-1", "title": "Chair"}}
	assert where.matches(where.equals("position", "pos-1"), doc)
	assert not where.matches(where.equals("position", "pos-2"), doc)


def test_equals_on_bool_is_strict():
	assert where.matches(where.equals("isActive", True), {"isActive": True})
	assert not where.matches(where.equals("isActive", True), {"isActive": 1})
	assert not where.matches(where.equals("isActive", True), {})


def test_dotted_path_reaches_into_arrays():
	doc = {"tags": [{"tag": "news"}, {"tag": "events"}]}
	assert where.matches(where.equals("tags.tag", "events"), doc)
	assert not where.matches(where.equals("tags.tag", "sports"), doc)


def test_contains_is_case_insensitive_substring():
	doc = {"title": "Annual Budget Report"}
	assert where.matches(where.contains("title", "budget"), doc)
	assert not where.matches(where.contains("title", "forecast"), doc)


def test_or_and_combination():
	tree = where.and_(
		where.equals("status", "published"),
		where.or_(where.contains("title", "camp"), where.contains("excerpt", "camp")),
	)
	assert where.matches(tree, {"status": "published", "title": "x", "excerpt": "Summer camp"})
	assert not where.matches(tree, {"status": "draft", "title": "Camp", "excerpt": ""})
	assert not where.matches(tree, {"status": "published", "title": "x", "excerpt": "y"})


def test_not_equals_and_missing_field():
	assert where.matches(where.not_equals("id", "a"), {"id": "b"})
	assert not where.matches(where.not_equals("id", "a"), {"id": "a"})
	assert where.matches(where.equals("deletedAt", None), {"id": "a"})


@pytest.mark.parametrize(
	"tree",
	[
		{"title": {"like": "x"}},
		{"title; DROP TABLE": {"equals": "x"}},
		{"title": "x"},
	],
)
def test_invalid_trees_are_rejected(tree):
	with pytest.raises(ValueError):
		where.matches(tree, {"title": "x"})
