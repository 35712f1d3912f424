from __future__ import annotations

import logging
from typing import Optional

import requests
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import RequestException, SSLError
from requests.exceptions import Timeout as RequestsTimeout

from harakapay.core.security import mask_phone
from harakapay.schemas.payment import PaymentInitiated, PaymentRequest

logger = logging.getLogger(__name__)

INITIATE_PATH = "/api/payments/initiate"


class PaymentInitiationError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PaymentGatewayClient:
    """Client for the external mobile-money payment-initiation API."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 30):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def initiate(self, payment: PaymentRequest, access_token: str) -> PaymentInitiated:
        url = f"{self.base_url}{INITIATE_PATH}"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }
        try:
            r = self._session.post(url, json=payment.to_payload(), headers=headers, timeout=self.timeout)
        except (RequestsTimeout, SSLError, RequestsConnectionError, RequestException) as e:
            err = f"Network error contacting payment service: {type(e).__name__}: {e}"
            logger.warning(err)
            raise PaymentInitiationError(err) from e

        try:
            data = r.json()
        except ValueError:
            logger.warning("Payment service returned non-JSON body (status %s)", r.status_code)
            raise PaymentInitiationError("Invalid response from payment service", status_code=r.status_code)
        if not isinstance(data, dict):
            raise PaymentInitiationError("Invalid response from payment service", status_code=r.status_code)

        if not 200 <= r.status_code < 300:
            message = data.get("error") or data.get("message") or "Payment initiation failed"
            logger.warning(
                "Payment initiation rejected for student %s phone %s: %s %s",
                payment.student_id,
                mask_phone(payment.phone_number),
                r.status_code,
                message,
            )
            raise PaymentInitiationError(str(message), status_code=r.status_code)

        transaction_id = data.get("transactionId")
        if not data.get("success", True) or not transaction_id:
            message = data.get("error") or data.get("message") or "Payment initiation failed"
            raise PaymentInitiationError(str(message), status_code=r.status_code)

        payment_id = data.get("paymentId")
        logger.info(
            "Payment %s initiated for student %s (transaction %s, phone %s)",
            payment_id,
            payment.student_id,
            transaction_id,
            mask_phone(payment.phone_number),
        )
        return PaymentInitiated(
            payment_id=str(payment_id) if payment_id is not None else None,
            transaction_id=str(transaction_id),
        )
