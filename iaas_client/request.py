"""Request - Runs one operation through the full pipeline.

check credentials -> validate -> marshal -> sign -> send -> unpack

Everything before send is pure CPU; a failure there costs no network I/O
and nothing is submitted.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from iaas_client.dispatcher import Dispatcher
from iaas_client.errors import ConfigError
from iaas_client.marshaller import build_parameters
from iaas_client.models import Operation, SignedRequest
from iaas_client.signer import Signer
from iaas_client.unmarshaller import unpack
from iaas_client.validator import validate

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


class Request(Generic[OutputT]):
    """Builds, signs, sends and unpacks one API call.

    Usage:
        request = Request(operation, CreateCacheInput(...), CreateCacheOutput, dispatcher)
        output = request.send()
    """

    def __init__(
        self,
        operation: Operation,
        input_value: BaseModel | None,
        output_type: type[OutputT],
        dispatcher: Dispatcher,
    ) -> None:
        self.operation = operation
        self.input_value = input_value
        self.output_type = output_type
        self._dispatcher = dispatcher

    def check(self) -> None:
        """Ensure the account credentials are configured."""
        config = self.operation.config
        if not config.access_key_id:
            raise ConfigError("access key not provided")
        if not config.secret_access_key:
            raise ConfigError("secret access key not provided")

    def build(self, timestamp: datetime | None = None) -> SignedRequest:
        """Validate, marshal and sign without sending.

        Raises:
            ConfigError: Credentials are missing.
            ClientValidationError: The input violates its schema.
        """
        self.check()
        if self.input_value is not None:
            validate(self.input_value)

        params = build_parameters(self.operation, self.input_value)
        logger.info("Built request: %s with %d parameters", self.operation.action, len(params))

        signer = Signer.from_config(self.operation.config)
        signed = signer.sign(
            params,
            self.operation.method,
            self.operation.config.request_path,
            timestamp=timestamp,
        )
        logger.info("Signed request: %s", self.operation.action)
        return signed

    def send(self, timeout: float | None = None) -> OutputT:
        """Run the whole pipeline.

        Returns:
            The populated Output model.

        Raises:
            ConfigError, ClientValidationError, TransportError, ServiceError, DecodeError.
        """
        signed = self.build()
        raw = self._dispatcher.send(
            signed,
            idempotent=self.operation.idempotent,
            timeout=timeout,
        )
        return unpack(raw, self.output_type)
