"""Builders and an evaluator for record store ``where`` trees.

A tree is either a leaf mapping ``{field: {operator: value}}`` (several fields
in one mapping are ANDed) or a combinator ``{"and": [...]}`` / ``{"or": [...]}``.
Field names may be dotted to reach into nested objects and arrays, e.g.
``tags.tag``.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Iterator, Mapping, Optional

from orgcms.infra.records import Where

OPERATORS = ("equals", "not_equals", "contains")
COMBINATORS = ("and", "or")

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def equals(field: str, value: Any) -> dict[str, Any]:
	return {field: {"equals": value}}


def not_equals(field: str, value: Any) -> dict[str, Any]:
	return {field: {"not_equals": value}}


def contains(field: str, value: str) -> dict[str, Any]:
	return {field: {"contains": value}}


def and_(*clauses: Optional[Where]) -> Optional[dict[str, Any]]:
	"""AND the non-empty clauses; a single clause is returned unchanged."""

	present = [dict(clause) for clause in clauses if clause]
	if not present:
		return None
	if len(present) == 1:
		return present[0]
	return {"and": present}


def or_(*clauses: Optional[Where]) -> Optional[dict[str, Any]]:
	present = [dict(clause) for clause in clauses if clause]
	if not present:
		return None
	if len(present) == 1:
		return present[0]
	return {"or": present}


def validate_field(name: str) -> str:
	if not _FIELD_RE.match(name):
		raise ValueError(f"invalid where field: {name!r}")
	return name


def iter_conditions(where: Where) -> Iterator[tuple[str, str, Any]]:
	"""Yield ``(field, operator, value)`` for each leaf in a single mapping."""

	for key, condition in where.items():
		if key in COMBINATORS:
			continue
		validate_field(key)
		if not isinstance(condition, Mapping):
			raise ValueError(f"where field {key!r} needs an operator mapping")
		for operator, value in condition.items():
			if operator not in OPERATORS:
				raise ValueError(f"unsupported where operator: {operator!r}")
			yield key, operator, value


def resolve_path(doc: Any, path: str) -> list[Any]:
	"""Return every value reachable at ``path``, flattening arrays on the way."""

	values: list[Any] = [doc]
	for part in path.split("."):
		nxt: list[Any] = []
		for value in values:
			if isinstance(value, list):
				candidates: Iterable[Any] = value
			else:
				candidates = (value,)
			for candidate in candidates:
				if isinstance(candidate, Mapping) and part in candidate:
					nxt.append(candidate[part])
		values = nxt
	flat: list[Any] = []
	for value in values:
		if isinstance(value, list):
			flat.extend(value)
		else:
			flat.append(value)
	return flat


def _same(actual: Any, expected: Any) -> bool:
	if isinstance(actual, Mapping):
		# Expanded relation: compare by id.
		actual = actual.get("id")
	if isinstance(actual, bool) or isinstance(expected, bool):
		return actual is expected
	if actual is None or expected is None:
		return actual is expected
	if isinstance(actual, str) or isinstance(expected, str):
		return str(actual) == str(expected)
	return actual == expected


def _check(doc: Mapping[str, Any], field: str, operator: str, value: Any) -> bool:
	candidates = resolve_path(doc, field)
	if operator == "equals":
		if value is None:
			return all(candidate is None for candidate in candidates)
		return any(_same(candidate, value) for candidate in candidates)
	if operator == "not_equals":
		return not any(_same(candidate, value) for candidate in candidates)
	needle = str(value).lower()
	return any(isinstance(candidate, str) and needle in candidate.lower() for candidate in candidates)


def matches(where: Optional[Where], doc: Mapping[str, Any]) -> bool:
	"""Evaluate a where tree against a stored document."""

	if not where:
		return True
	for key in COMBINATORS:
		if key in where:
			branches = where[key] or []
			if key == "and" and not all(matches(branch, doc) for branch in branches):
				return False
			if key == "or" and branches and not any(matches(branch, doc) for branch in branches):
				return False
	return all(_check(doc, field, operator, value) for field, operator, value in iter_conditions(where))
