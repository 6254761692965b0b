# codec.py - Share token for one or two scenarios

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from config import SHARE_PARAM
from models import Scenario

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SharedState:
    a: Optional[Scenario]
    b: Optional[Scenario]


def encode(scenario_a, scenario_b=None):
    """
    {"A": a, "B": b} -> JSON -> UTF-8 -> URL-safe base64 (no padding).
    Encoding the UTF-8 bytes keeps non-ASCII names intact.
    """
    data = {
        "A": scenario_a.to_dict(),
        "B": scenario_b.to_dict() if scenario_b is not None else None,
    }
    raw = json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _side(data, key):
    record = data.get(key)
    if record is None:
        return None
    return Scenario.from_dict(record)


def decode(token):
    """
    Inverse of encode(). Returns None for anything that is not a valid token.
    """
    if not isinstance(token, str) or not token:
        return None
    # Older links use the standard alphabet with padding
    token = token.strip().replace("+", "-").replace("/", "_").rstrip("=")
    token += "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, dict):
            return None
        return SharedState(a=_side(data, "A"), b=_side(data, "B"))
    except (binascii.Error, UnicodeError, ValueError, TypeError, RecursionError) as e:
        logger.debug("Ignoring invalid share token: %s", e)
        return None


def share_url(base_url, scenario_a, scenario_b=None):
    """Sets the share parameter on base_url, keeping its other parameters."""
    parts = urlsplit(base_url)
    query = {k: v for k, v in parse_qs(parts.query).items() if k != SHARE_PARAM}
    query[SHARE_PARAM] = [encode(scenario_a, scenario_b)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def state_from_url(url):
    """Decoded state of a share URL, or None when the parameter is absent or invalid."""
    values = parse_qs(urlsplit(url).query).get(SHARE_PARAM)
    if not values:
        return None
    return decode(values[0])
