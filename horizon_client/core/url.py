from yarl import URL

from horizon_client import config


def base_url(url: str | None = None) -> URL:
    return URL(url or config.HORIZON_URL)


def join_url(base: str | URL, *segments, **params) -> str:
    """Append path segments to `base`, keeping the query items it already carries.

    Parameters whose value is None are left out.
    """
    url = URL(base) if isinstance(base, str) else base
    path = "/".join([url.path.rstrip("/")] + [str(s).strip("/") for s in segments])
    joined = url.with_path(path or "/").with_query(url.query)
    query = {k: v for k, v in params.items() if v is not None}
    if query:
        joined = joined.update_query(query)
    return str(joined)


def with_cursor(url: str, cursor: str) -> str:
    return str(URL(url).update_query(cursor=cursor))
