"""Observability bootstrap: JSON logs, request metrics and optional tracing."""

from __future__ import annotations

from fastapi import FastAPI

from portal.obs import logging as obs_logging
from portal.obs import middleware, tracing
from portal.settings import settings

_installed_on: set[int] = set()


def init(app: FastAPI) -> None:
	"""Wire observability into ``app``; repeated calls for the same app are ignored."""
	if not settings.obs_enabled or id(app) in _installed_on:
		return
	obs_logging.configure_logging()
	middleware.install(app)
	tracing.init_tracing(app)
	_installed_on.add(id(app))


__all__ = ["init"]
