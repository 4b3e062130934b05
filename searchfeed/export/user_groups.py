"""User group hashing.

The search service only ever sees customer groups as a hash derived from
the shopkey, so group ids are not exposed in the feed.
"""

import base64


def calculate_user_group_hash(shopkey: str, customer_group_id: str) -> str:
    """Calculate the user group hash of a customer group.

    The hash is the base64 encoding of the byte-wise XOR of shopkey and
    customer group id, truncated to the shorter of the two.

    Args:
        shopkey: Shopkey of the shop.
        customer_group_id: Customer group ID.

    Returns:
        Base64 encoded hash.
    """
    xored = bytes(
        a ^ b
        for a, b in zip(shopkey.encode("utf-8"), customer_group_id.encode("utf-8"))
    )
    return base64.b64encode(xored).decode("ascii")
