"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orgcms import __version__
from orgcms import obs
from orgcms.api import admin, ops, public
from orgcms.api.errors import install_error_handlers
from orgcms.domain.activity import recorder
from orgcms.infra import store
from orgcms.settings import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
	await store.init_store()
	try:
		yield
	finally:
		# Let in-flight view counts and activity entries land before closing.
		await recorder.drain()
		await store.close_store()


app = FastAPI(title="Organization CMS API", version=__version__, lifespan=lifespan)
obs.init(app)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins:
	allow_origins = ["http://localhost:3000"] if settings.is_dev() else []

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials="*" not in allow_origins,
	allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
	allow_headers=["Content-Type", "Authorization"],
)

app.include_router(public.router)
app.include_router(admin.router)
app.include_router(ops.router)
