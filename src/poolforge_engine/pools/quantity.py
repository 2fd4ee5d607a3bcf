"""Pool quantity parsing policies.

A policy turns caller-supplied quantity input into a pool quantity. The
lenient policy is the historical behavior: anything unparseable becomes 0.
The strict policy rejects the same input instead.
"""

import logging
import re
from typing import Callable, Union

from poolforge_engine.common.exceptions import BadRequestError
from poolforge_engine.pools.models import UNLIMITED_QUANTITY

logger = logging.getLogger(__name__)

QuantityInput = Union[str, int, None]
QuantityPolicy = Callable[[QuantityInput], int]

UNLIMITED_TOKEN = "unlimited"

_INTEGER = re.compile(r"[+-]?\d+")


def _parse(quantity: QuantityInput, unlimited_token: str) -> int | None:
    """Return the parsed quantity, or None if the input is not acceptable."""
    if quantity is None or isinstance(quantity, bool):
        return None
    if isinstance(quantity, int):
        value = quantity
    else:
        text = str(quantity).strip()
        if text.lower() == unlimited_token.lower():
            return UNLIMITED_QUANTITY
        # ASCII digits only, no underscore separators.
        if not text.isascii() or _INTEGER.fullmatch(text) is None:
            return None
        value = int(text)

    if value < 0 and value != UNLIMITED_QUANTITY:
        return None
    return value


def lenient_quantity(quantity: QuantityInput, unlimited_token: str = UNLIMITED_TOKEN) -> int:
    """Parse a quantity, coercing anything invalid to 0."""
    value = _parse(quantity, unlimited_token)
    if value is None:
        logger.warning("Unparseable pool quantity %r coerced to 0", quantity)
        return 0
    return value


def strict_quantity(quantity: QuantityInput, unlimited_token: str = UNLIMITED_TOKEN) -> int:
    """Parse a quantity, raising BadRequestError for anything invalid."""
    value = _parse(quantity, unlimited_token)
    if value is None:
        raise BadRequestError(f"Invalid pool quantity: {quantity!r}")
    return value


_POLICIES: dict[str, Callable[..., int]] = {
    "lenient": lenient_quantity,
    "strict": strict_quantity,
}


def get_quantity_policy(name: str, unlimited_token: str = UNLIMITED_TOKEN) -> QuantityPolicy:
    """Look up a policy by its configured name."""
    try:
        policy = _POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown quantity policy: {name!r}") from None
    return lambda quantity: policy(quantity, unlimited_token)
