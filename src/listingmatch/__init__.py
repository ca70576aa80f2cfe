"""listingmatch package root.

Lazy export of :func:`create_app` so that importing the scoring core
(``listingmatch.comparables``) never pulls in Flask. The CLI and the test
suite use the core directly; only the HTTP entry points need the app factory.

Downstream code can still ``from listingmatch import create_app``; the Flask
application factory is imported only when first accessed.
"""

__all__ = ["create_app"]

__version__ = "0.3.0"


def create_app(*args, **kwargs):  # type: ignore[no-untyped-def]
	# Local import keeps Flask optional for core-only consumers
	from .app import create_app as _create_app  # noqa: WPS433
	return _create_app(*args, **kwargs)
