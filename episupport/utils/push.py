import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

import requests

from episupport.config import PUSH_GATEWAY_URL, PUSH_TIMEOUT_SECONDS
from episupport.schemas.enums import DeliveryStatus

logger = logging.getLogger(__name__)


# ---------------- DELIVERY RESULTS ----------------
@dataclass(frozen=True)
class Delivered:
    token: str
    status: DeliveryStatus = DeliveryStatus.DELIVERED
    reason: Optional[str] = None


@dataclass(frozen=True)
class Failed:
    token: str
    reason: str
    status: DeliveryStatus = DeliveryStatus.FAILED


DeliveryResult = Union[Delivered, Failed]


# ---------------- PUSH SENDER ----------------
class PushNotifier:
    """
    Best-effort sender for the Expo-compatible push gateway.

    One POST per call, JSON body {to, title, body, data}. Never raises and
    never retries: transport errors, non-2xx answers and error tickets all
    come back as Failed.
    """

    def __init__(
        self,
        url: str = PUSH_GATEWAY_URL,
        timeout: float = PUSH_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session

    def _post(self, payload: dict) -> requests.Response:
        poster = self.session.post if self.session is not None else requests.post
        return poster(
            self.url,
            json=payload,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )

    def send(self, push_token: str, title: str, body: str, data: Optional[Dict[str, str]] = None) -> DeliveryResult:
        if not push_token:
            return Failed(token=push_token or "", reason="no push token")

        payload = {
            "to": push_token,
            "title": title,
            "body": body,
            "data": data or {},
        }

        try:
            resp = self._post(payload)
        except requests.RequestException as e:
            logger.warning("Push transport error for token %s: %s", _mask(push_token), e)
            return Failed(token=push_token, reason=f"transport error: {e}")

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.warning("Push gateway returned %s for token %s: %s", resp.status_code, _mask(push_token), resp.text)
            return Failed(token=push_token, reason=f"gateway status {resp.status_code}")

        # Expo answers 200 with a per-message ticket; an error ticket is still a failure
        ticket_error = _ticket_error(resp)
        if ticket_error:
            logger.warning("Push ticket error for token %s: %s", _mask(push_token), ticket_error)
            return Failed(token=push_token, reason=ticket_error)

        logger.info("📲 Push sent to token %s", _mask(push_token))
        return Delivered(token=push_token)

    def send_to_user(self, user, title: str, body: str, data: Optional[Dict[str, str]] = None) -> DeliveryResult:
        token = getattr(user, "push_token", None)
        if not token:
            logger.info("User %s has no push token, skipping notification", getattr(user, "email", None))
            return Failed(token="", reason="no push token")
        return self.send(token, title, body, data)


def _mask(token: str) -> str:
    # only a prefix of a device token goes to the logs
    return f"{token[:10]}..." if len(token) > 16 else "***"


def _ticket_error(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    ticket = body.get("data") if isinstance(body, dict) else None
    if isinstance(ticket, list):
        ticket = ticket[0] if ticket else None
    if isinstance(ticket, dict) and ticket.get("status") == "error":
        return ticket.get("message") or "push ticket error"
    return None
