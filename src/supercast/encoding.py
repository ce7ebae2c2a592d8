r"""Write-only parameter encoder with a per-request cache.

Every request needs its parameters encoded twice: once for the wire and
once for the request logs. :class:`ParamsEncoder` encodes each distinct
parameter object once and hands back the cached string afterwards, so the
two uses can never diverge. An encoder lives for one logical call and is
discarded with it.
"""

from __future__ import annotations

__all__ = ["ParamsEncoder"]

from typing import TYPE_CHECKING, Any

from supercast.utils.params import encode_parameters, flatten_params

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


class ParamsEncoder:
    """Encode parameters, caching the result per parameter object.

    The cache is keyed by object identity. The encoder keeps a reference
    to every object it encoded, so an identity cannot be reused by another
    object while the encoder is alive.

    Args:
        multipart: If ``True``, the parameters are sent as
            ``multipart/form-data`` by the transport and the encoder only
            produces a readable representation for the logs.
        encode_func: The function used to encode parameters.

    Example:
        ```pycon
        >>> from supercast.encoding import ParamsEncoder
        >>> encoder = ParamsEncoder()
        >>> params = {"a": [1, 2], "b": {"c": 3}}
        >>> encoder.encode(params)
        'a[0]=1&a[1]=2&b[c]=3'
        >>> encoder.encode(params) is encoder.encode(params)
        True

        ```
    """

    def __init__(
        self,
        multipart: bool = False,
        encode_func: Callable[[Mapping[str, Any]], str] | None = None,
    ) -> None:
        self.multipart = multipart
        self._encode_func = encode_func or (_inspect if multipart else encode_parameters)
        self._cache: dict[int, tuple[Mapping[str, Any], str]] = {}

    def encode(self, params: Mapping[str, Any]) -> str:
        """Encode the parameters.

        Args:
            params: The nested parameters.

        Returns:
            The encoded parameters, computed once per parameter object.
        """
        entry = self._cache.get(id(params))
        if entry is None:
            entry = (params, self._encode_func(params))
            self._cache[id(params)] = entry
        return entry[1]

    def decode(self, value: str) -> Any:
        r"""Not supported: the encoder is write-only.

        Raises:
            NotImplementedError: Always.
        """
        msg = f"{type(self).__name__} does not implement decode"
        raise NotImplementedError(msg)


def _inspect(params: Mapping[str, Any]) -> str:
    return repr(dict(flatten_params(params)))
