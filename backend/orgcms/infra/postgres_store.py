"""Record store backed by JSONB rows in Postgres."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional
from uuid import uuid4

import asyncpg

from orgcms.domain.errors import NotFoundError, StoreError
from orgcms.infra import where as where_tree
from orgcms.infra.records import RELATIONS, Document, FindResult, Where, apply_defaults, page_window, relation_id
from orgcms.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS cms_records (
	collection TEXT NOT NULL,
	id TEXT NOT NULL,
	seq BIGSERIAL,
	data JSONB NOT NULL,
	created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
	updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
	PRIMARY KEY (collection, id)
);
CREATE INDEX IF NOT EXISTS cms_records_collection_seq ON cms_records (collection, seq);
CREATE TABLE IF NOT EXISTS cms_globals (
	slug TEXT PRIMARY KEY,
	data JSONB NOT NULL,
	updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""

_STORE_FAILURES = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _json_path(field: str) -> str:
	where_tree.validate_field(field)
	return "$." + ".".join(f'"{part}"' for part in field.split("."))


def _like_pattern(value: Any) -> str:
	text = str(value).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
	return f"%{text}%"


def _leaf_sql(field: str, operator: str, value: Any, params: list[Any]) -> str:
	params.append(_json_path(field))
	path_idx = len(params)
	source = f"jsonb_path_query(data, ${path_idx}::jsonpath) AS v(val)"
	if operator == "contains":
		params.append(_like_pattern(value))
		return f"EXISTS (SELECT 1 FROM {source} WHERE jsonb_typeof(v.val) = 'string' AND (v.val #>> '{{}}') ILIKE ${len(params)})"
	if value is None:
		clause = f"NOT EXISTS (SELECT 1 FROM {source} WHERE v.val <> 'null'::jsonb)"
		return clause if operator == "equals" else f"NOT ({clause})"
	# The pool's jsonb codec serialises the bound value.
	params.append(value)
	clause = f"EXISTS (SELECT 1 FROM {source} WHERE v.val = ${len(params)}::jsonb)"
	return clause if operator == "equals" else f"NOT {clause}"


def compile_where(where: Optional[Where], params: list[Any]) -> str:
	"""Compile a where tree to a SQL predicate, appending bind values to ``params``."""

	if not where:
		return "TRUE"
	parts: list[str] = []
	for key, joiner in (("and", " AND "), ("or", " OR ")):
		branches = [branch for branch in where.get(key) or [] if branch]
		if branches:
			parts.append("(" + joiner.join(compile_where(branch, params) for branch in branches) + ")")
	for field, operator, value in where_tree.iter_conditions(where):
		parts.append(_leaf_sql(field, operator, value, params))
	return " AND ".join(parts) if parts else "TRUE"


def compile_sort(sort: Optional[str]) -> str:
	if not sort:
		return "seq ASC"
	direction = "DESC" if sort.startswith("-") else "ASC"
	field = where_tree.validate_field(sort.lstrip("-"))
	path = "{" + ",".join(field.split(".")) + "}"
	return f"(data #> '{path}') {direction} NULLS LAST, seq ASC"


class PostgresRecordStore:
	def __init__(self, pool: asyncpg.pool.Pool) -> None:
		self._pool = pool

	async def ensure_schema(self) -> None:
		with self._guard("migrate", "*"):
			async with self._pool.acquire() as conn:
				await conn.execute(SCHEMA_SQL)

	@contextmanager
	def _guard(self, operation: str, collection: str) -> Iterator[None]:
		try:
			yield
		except _STORE_FAILURES as exc:
			obs_metrics.inc_store_error(operation, collection)
			logger.exception("store_failure", extra={"operation": operation, "collection": collection})
			raise StoreError(operation, collection, exc) from exc

	async def find(
		self,
		collection: str,
		*,
		where: Optional[Where] = None,
		sort: Optional[str] = None,
		limit: int = 10,
		page: int = 1,
		depth: int = 0,
	) -> FindResult:
		params: list[Any] = [collection]
		predicate = compile_where(where, params)
		with self._guard("find", collection):
			async with self._pool.acquire() as conn:
				total = await conn.fetchval(
					f"SELECT COUNT(*) FROM cms_records WHERE collection = $1 AND {predicate}",
					*params,
				)
				result = page_window(int(total or 0), limit, page)
				if result.limit > 0:
					window_params = [*params, result.limit, (result.page - 1) * result.limit]
					rows = await conn.fetch(
						f"""
						SELECT data, created_at, updated_at FROM cms_records
						WHERE collection = $1 AND {predicate}
						ORDER BY {compile_sort(sort)}
						LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
						""",
						*window_params,
					)
					docs = [_with_timestamps(row) for row in rows]
					result.docs = await self._populate(conn, collection, docs, depth)
		return result

	async def create(self, collection: str, data: Mapping[str, Any]) -> Document:
		doc: Document = apply_defaults(collection, dict(data))
		doc["id"] = str(doc.get("id") or uuid4())
		for field in RELATIONS.get(collection, {}):
			if field in doc:
				doc[field] = relation_id(doc[field])
		with self._guard("create", collection):
			async with self._pool.acquire() as conn:
				row = await conn.fetchrow(
					"""
					INSERT INTO cms_records (collection, id, data)
					VALUES ($1, $2, $3)
					RETURNING data, created_at, updated_at
					""",
					collection,
					doc["id"],
					doc,
				)
		return _with_timestamps(row)

	async def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> Document:
		patch: Document = dict(data)
		patch.pop("id", None)
		for field in RELATIONS.get(collection, {}):
			if field in patch:
				patch[field] = relation_id(patch[field])
		with self._guard("update", collection):
			async with self._pool.acquire() as conn:
				row = await conn.fetchrow(
					"""
					UPDATE cms_records
					SET data = data || $3::jsonb, updated_at = NOW()
					WHERE collection = $1 AND id = $2
					RETURNING data, created_at, updated_at
					""",
					collection,
					str(doc_id),
					patch,
				)
		if row is None:
			raise NotFoundError(f"{collection} document not found", code=f"{collection}_not_found")
		return _with_timestamps(row)

	async def find_global(self, slug: str, *, depth: int = 0) -> Document:
		with self._guard("find_global", slug):
			async with self._pool.acquire() as conn:
				row = await conn.fetchrow("SELECT data FROM cms_globals WHERE slug = $1", slug)
		return dict(row["data"]) if row else {}

	async def update_global(self, slug: str, data: Mapping[str, Any]) -> Document:
		with self._guard("update_global", slug):
			async with self._pool.acquire() as conn:
				row = await conn.fetchrow(
					"""
					INSERT INTO cms_globals (slug, data) VALUES ($1, $2)
					ON CONFLICT (slug) DO UPDATE SET data = cms_globals.data || EXCLUDED.data, updated_at = NOW()
					RETURNING data
					""",
					slug,
					{"globalType": slug, **dict(data)},
				)
		return dict(row["data"])

	async def close(self) -> None:
		await self._pool.close()

	async def _populate(self, conn: asyncpg.Connection, collection: str, docs: list[Document], depth: int) -> list[Document]:
		relations = RELATIONS.get(collection, {})
		if depth <= 0 or not docs or not relations:
			return docs
		for field, target in relations.items():
			ids = sorted({rid for rid in (relation_id(doc.get(field)) for doc in docs) if rid})
			if not ids:
				continue
			rows = await conn.fetch(
				"SELECT data, created_at, updated_at FROM cms_records WHERE collection = $1 AND id = ANY($2::text[])",
				target,
				ids,
			)
			related = await self._populate(conn, target, [_with_timestamps(row) for row in rows], depth - 1)
			by_id = {item["id"]: item for item in related}
			for doc in docs:
				rid = relation_id(doc.get(field))
				if rid in by_id:
					doc[field] = by_id[rid]
		return docs


def _with_timestamps(row: Mapping[str, Any]) -> Document:
	doc = dict(row["data"])
	doc.setdefault("createdAt", row["created_at"].isoformat())
	doc["updatedAt"] = row["updated_at"].isoformat()
	return doc
