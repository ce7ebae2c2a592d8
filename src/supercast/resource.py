r"""Base class of the API resources.

A resource maps a JSON object of the API onto a Python object and
provides the CRUD-shaped class methods that call the active client.
Concrete resources only set :attr:`APIResource.OBJECT_NAME`::

    class Episode(APIResource):
        OBJECT_NAME = "episode"

    episode = Episode.retrieve(1)
"""

from __future__ import annotations

__all__ = ["APIResource"]

from typing import TYPE_CHECKING, Any, ClassVar
from urllib.parse import quote

from supercast.exceptions import InvalidRequestError
from supercast.scope import get_active_client

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Self

    from supercast.response import SupercastResponse


class APIResource:
    """An object of the Supercast API.

    Args:
        id: The identifier of the object, if it has one.
        **values: The other fields of the object.

    Example:
        ```pycon
        >>> from supercast.resource import APIResource
        >>> class Episode(APIResource):
        ...     OBJECT_NAME = "episode"
        ...
        >>> Episode.class_url()
        '/episodes'
        >>> episode = Episode.construct_from({"id": 1, "title": "Pilot"})
        >>> episode.instance_url(), episode["title"]
        ('/episodes/1', 'Pilot')

        ```
    """

    OBJECT_NAME: ClassVar[str] = ""

    def __init__(self, id: int | str | None = None, **values: Any) -> None:  # noqa: A002
        self.id = id
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __getattr__(self, name: str) -> Any:
        try:
            return self.__dict__["_values"][name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"

    def to_dict(self) -> dict[str, Any]:
        r"""Return the fields of the object, including its ``id``."""
        return {"id": self.id, **self._values}

    @classmethod
    def construct_from(cls, data: Mapping[str, Any]) -> Self:
        r"""Create an object from its decoded JSON representation."""
        values = dict(data)
        return cls(values.pop("id", None), **values)

    @classmethod
    def class_url(cls) -> str:
        if not cls.OBJECT_NAME:
            msg = "APIResource is an abstract class. Use one of its subclasses."
            raise NotImplementedError(msg)
        return f"/{quote(cls.OBJECT_NAME.lower())}s"

    def instance_url(self) -> str:
        if self.id is None:
            msg = f"Could not determine which URL to request: {type(self).__name__} has no id"
            raise InvalidRequestError(msg)
        return f"{self.class_url()}/{quote(str(self.id), safe='')}"

    @classmethod
    def request(
        cls,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> tuple[Any, SupercastResponse]:
        """Execute a request with the active client.

        Args:
            method: The HTTP method.
            path: The request path.
            params: The request parameters.
            **options: Per-request options (``api_key``, ``api_base``,
                ``api_version``, ``headers``).

        Returns:
            The decoded data and the response.
        """
        response, _ = get_active_client().execute_request(method, path, params=params, **options)
        return response.data, response

    @classmethod
    def retrieve(cls, id: int | str, **options: Any) -> Self:  # noqa: A002
        instance = cls(id)
        data, _ = cls.request("get", instance.instance_url(), **options)
        return cls.construct_from(data)

    @classmethod
    def create(cls, params: Mapping[str, Any] | None = None, **options: Any) -> Self:
        data, _ = cls.request("post", cls.class_url(), params, **options)
        return cls.construct_from(data)

    @classmethod
    def update(cls, id: int | str, params: Mapping[str, Any] | None = None, **options: Any) -> Self:  # noqa: A002
        data, _ = cls.request("patch", cls(id).instance_url(), params, **options)
        return cls.construct_from(data)

    @classmethod
    def delete(cls, id: int | str, params: Mapping[str, Any] | None = None, **options: Any) -> Any:  # noqa: A002
        data, _ = cls.request("delete", cls(id).instance_url(), params, **options)
        return data

    @classmethod
    def list(cls, params: Mapping[str, Any] | None = None, **options: Any) -> Any:
        data, _ = cls.request("get", cls.class_url(), params, **options)
        return data
