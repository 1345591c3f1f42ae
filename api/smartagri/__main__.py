"""Entrypoint for `python -m smartagri`."""

import uvicorn

from smartagri.config import settings

uvicorn.run("smartagri.main:app", host=settings.host, port=settings.port)
