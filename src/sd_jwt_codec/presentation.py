"""Presentation rebuilding: reduce a credential to the claims a holder chooses to show."""

import logging
import time
from collections.abc import Iterable
from typing import Any, Optional

from .disclosure import Disclosure, parse_disclosures
from .jwt_utils import DISCLOSURE_SEPARATOR, parse_jwt, split_sd_jwt

logger = logging.getLogger(__name__)

SD_JWT_VC_FORMAT = "vc+sd-jwt"


def select_disclosures_by_claim_names(
    disclosures: list[Disclosure],
    claim_names: Iterable[str],
) -> list[Disclosure]:
    """Select disclosures that match the specified claim names.

    Args:
        disclosures: Parsed disclosures in token order
        claim_names: Claim names to keep (order and duplicates are irrelevant)

    Returns:
        Matching disclosures, in their original order
    """
    wanted = set(claim_names)
    return [d for d in disclosures if d.key in wanted]


def rebuild_sd_jwt(token: str, keep_keys: Iterable[str]) -> str:
    """Rebuild a compact SD-JWT containing only the selected disclosures.

    Each kept disclosure is re-emitted as its original encoded segment so its
    digest still matches the issuer-signed ``_sd`` list. Any key-binding JWT
    is dropped because it was bound to the original disclosure set. With no
    kept disclosures the result is the bare JWT, without a trailing ``~``.

    Args:
        token: Compact SD-JWT string
        keep_keys: Claim names to keep

    Returns:
        The reduced compact token
    """
    jwt = split_sd_jwt(token).jwt
    disclosures = parse_disclosures(token)
    kept = select_disclosures_by_claim_names(disclosures, keep_keys)
    logger.debug("Keeping %d of %d disclosures", len(kept), len(disclosures))
    return DISCLOSURE_SEPARATOR.join([jwt] + [d.disclosure for d in kept])


def create_presentation_submission(
    token: str,
    keep_keys: Iterable[str],
    request: dict[str, Any],
    submission_id: Optional[str] = None,
) -> dict[str, Any]:
    """Build the OID4VP response body for a reduced credential.

    Only the body is produced; posting it to the request's ``response_uri``
    is left to the caller.

    Args:
        token: Compact SD-JWT string held by the wallet
        keep_keys: Claim names the holder agreed to disclose
        request: Presentation request with ``presentation_definition`` and ``state``
        submission_id: Optional id for the submission (time-based if None)

    Returns:
        Dictionary with ``vp_token``, ``state`` and ``presentation_submission``

    Raises:
        ValueError: If the request has no presentation definition id
    """
    definition = request.get("presentation_definition")
    if not isinstance(definition, dict) or not definition.get("id"):
        raise ValueError("Presentation request has no presentation_definition.id")

    parts = split_sd_jwt(token)
    payload = parse_jwt(parts.jwt) or {}
    vc = payload.get("vc")
    credential_id = vc.get("id") if isinstance(vc, dict) else None

    if submission_id is None:
        submission_id = f"presentation-{int(time.time() * 1000)}"

    return {
        "vp_token": rebuild_sd_jwt(token, keep_keys),
        "state": request.get("state"),
        "presentation_submission": {
            "id": submission_id,
            "definition_id": definition["id"],
            "descriptor_map": [
                {
                    "id": credential_id or "credential",
                    "format": SD_JWT_VC_FORMAT,
                    "path": "$",
                }
            ],
        },
    }
