"""Run the API with uvicorn: ``python -m orgcms``."""

from __future__ import annotations

import os

import uvicorn


def main() -> None:
	port = int(os.getenv("PORT", "3000"))
	uvicorn.run("orgcms.main:app", host=os.getenv("HOST", "0.0.0.0"), port=port)


if __name__ == "__main__":
	main()
