"""
Display-safe rendering of API keys.

Masking rule:
    sk_test_1234abcd            -> sk_test_********
    rk_live_0000000001          -> rk_live_******0001
    opaque-token-value          -> **************alue
    ghp_Xk29fLq8_a              -> **********q8_a

The ``<type>_<mode>_`` prefix is kept only for recognized key types and
modes, so the user can tell which kind of key is active. Any other value is
masked as a whole. Of the masked part, the last 4 characters survive only when
more than 8 characters are present; everything else becomes ``*``. Output has
the same length as the input and is a pure function of it.
"""

MASK_CHAR = "*"
VISIBLE_SUFFIX = 4
MIN_BODY_FOR_SUFFIX = 9

KEY_TYPES = frozenset({"sk", "rk", "pk"})
KEY_MODES = frozenset({"test", "live"})


def _mask(body: str) -> str:
    if len(body) >= MIN_BODY_FOR_SUFFIX:
        return MASK_CHAR * (len(body) - VISIBLE_SUFFIX) + body[-VISIBLE_SUFFIX:]
    return MASK_CHAR * len(body)


def redact_api_key(api_key: str) -> str:
    """
    Mask an API key for display.

    Args:
        api_key: Raw key

    Returns:
        Masked key, never the raw value

    Example:
        >>> redact_api_key("rk_live_0000000001")
        'rk_live_******0001'
    """
    if not api_key:
        return ""

    parts = api_key.split("_", 2)
    if len(parts) == 3 and parts[0] in KEY_TYPES and parts[1] in KEY_MODES and parts[2]:
        return f"{parts[0]}_{parts[1]}_{_mask(parts[2])}"

    return _mask(api_key)
