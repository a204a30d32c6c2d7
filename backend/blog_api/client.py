"""
HTTP client for the blog API.

BlogClient is what the web frontend does, minus the rendering: it keeps the
bearer token issued at login/registration and sends it on every protected
call. Search, sort and feed statistics are computed client-side over the
posts the API returns, the same way the feed page does it.
"""
from typing import Any, Dict, List, Optional, Union
import httpx

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    """Raised for any non-2xx API response"""

    def __init__(self, status_code: int, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or {}


class BlogClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0
    ):
        # An injected client (e.g. FastAPI's TestClient) brings its own base URL
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, auth: bool = False, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if auth:
            if not self.token:
                raise ApiError(401, "Not logged in")
            headers["Authorization"] = f"Bearer {self.token}"

        response = self._http.request(method, path, headers=headers, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.is_error:
            raise ApiError(
                response.status_code,
                body.get("error", response.reason_phrase),
                body.get("errors"),
            )
        return body

    # Auth

    def register(self, name: str, email: str, password: str, bio: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "email": email, "password": password}
        if bio is not None:
            payload["bio"] = bio
        body = self._request("POST", "/api/auth/register", json=payload)
        self.token = body["token"]
        return body["user"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = body["token"]
        return body["user"]

    def logout(self) -> None:
        self.token = None

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me", auth=True)["user"]

    # Posts

    def list_posts(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """Returns {"posts": [...], "pagination": {...}}"""
        body = self._request("GET", "/api/posts", params={"page": page, "limit": limit})
        return {"posts": body["posts"], "pagination": body["pagination"]}

    def get_post(self, post_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/posts/{post_id}")["post"]

    def create_post(
        self,
        title: str,
        content: str,
        tags: Union[str, List[str], None] = None,
        image: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {"title": title, "content": content}
        if tags is not None:
            payload["tags"] = tags
        if image is not None:
            payload["image"] = image
        return self._request("POST", "/api/posts", auth=True, json=payload)["post"]

    def update_post(
        self,
        post_id: int,
        title: str,
        content: str,
        tags: Union[str, List[str], None] = None,
        image: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {"title": title, "content": content}
        if tags is not None:
            payload["tags"] = tags
        if image is not None:
            payload["image"] = image
        return self._request("PUT", f"/api/posts/{post_id}", auth=True, json=payload)["post"]

    def delete_post(self, post_id: int) -> None:
        self._request("DELETE", f"/api/posts/{post_id}", auth=True)

    # Users

    def my_profile(self) -> Dict[str, Any]:
        """Returns {"profile": {...}, "posts": [...]}"""
        body = self._request("GET", "/api/users/profile", auth=True)
        return {"profile": body["profile"], "posts": body["posts"]}

    def my_posts(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/users/posts/me", auth=True)["posts"]

    def user_profile(self, user_id: int) -> Dict[str, Any]:
        """Returns {"user": {...}, "posts": [...]}"""
        body = self._request("GET", f"/api/users/{user_id}")
        return {"user": body["user"], "posts": body["posts"]}

    def update_profile(
        self,
        name: str,
        email: str,
        bio: Optional[str] = None,
        profile_pic: Optional[str] = None
    ) -> Dict[str, Any]:
        payload = {"name": name, "email": email}
        if bio is not None:
            payload["bio"] = bio
        if profile_pic is not None:
            payload["profilePic"] = profile_pic
        return self._request("PUT", "/api/users/profile", auth=True, json=payload)["profile"]

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/health")


def search_posts(posts: List[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """Posts whose title, content, any tag or author name contains `query`"""
    needle = query.strip().lower()
    if not needle:
        return list(posts)

    def matches(post):
        return (
            needle in post.get("title", "").lower()
            or needle in post.get("content", "").lower()
            or any(needle in tag.lower() for tag in post.get("tags") or [])
            or needle in (post.get("authorName") or "").lower()
        )

    return [post for post in posts if matches(post)]


def _created_at(post: Dict[str, Any]) -> str:
    # ISO-8601 timestamps from the API sort chronologically as strings
    return post.get("createdAt") or ""


def sort_posts(posts: List[Dict[str, Any]], by: str = "recent") -> List[Dict[str, Any]]:
    """Order a feed by "recent" (newest first) or "popular" (most likes first)"""
    if by == "popular":
        return sorted(posts, key=lambda post: post.get("likes") or 0, reverse=True)
    if by == "recent":
        return sorted(posts, key=_created_at, reverse=True)
    raise ValueError(f"Unknown sort order: {by}")


def feed_stats(posts: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "total_posts": len(posts),
        "total_views": sum(post.get("views") or 0 for post in posts),
        "total_authors": len({post.get("authorId") for post in posts}),
    }
