"""AWS session and caller identity."""

from __future__ import annotations

from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Any

import aioboto3  # type: ignore
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import AuthError
from .naming import partition_from_arn


@dataclass(frozen=True)
class CallerIdentity:
    """Identity returned by STS GetCallerIdentity."""

    account_id: str
    arn: str
    partition: str


class AwsSession:
    """
    Owns an aioboto3 session and the clients opened from it.

    Each component receives the client it needs explicitly; there is
    no module-level client.

    Example:
        async with AwsSession(profile="dev-admin", region="ap-southeast-2") as aws:
            identity = await aws.caller_identity()
            lambda_client = await aws.lambda_client()

    Attributes:
        profile: Shared config profile name
        region: AWS region
        endpoint_url: Optional endpoint override (for LocalStack)
    """

    def __init__(
        self,
        profile: str | None,
        region: str | None = None,
        endpoint_url: str | None = None,
    ) -> None:
        self.profile = profile
        self.region = region
        self.endpoint_url = endpoint_url
        self._session: aioboto3.Session | None = None
        self._stack = AsyncExitStack()
        self._clients: dict[str, Any] = {}

    def _get_session(self) -> aioboto3.Session:
        if self._session is None:
            try:
                self._session = aioboto3.Session(
                    profile_name=self.profile,
                    region_name=self.region,
                )
            except BotoCoreError as e:
                raise AuthError(f"Unable to load AWS profile '{self.profile}'", e) from e
        return self._session

    async def _get_client(self, service: str) -> Any:
        """Get or create a client for ``service``."""
        if service in self._clients:
            return self._clients[service]

        kwargs: dict[str, Any] = {}
        if self.region:
            kwargs["region_name"] = self.region
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url

        session = self._get_session()
        try:
            client = await self._stack.enter_async_context(session.client(service, **kwargs))
        except BotoCoreError as e:
            raise AuthError(f"Unable to create {service} client", e) from e
        self._clients[service] = client
        return client

    async def lambda_client(self) -> Any:
        return await self._get_client("lambda")

    async def cloudwatch_client(self) -> Any:
        return await self._get_client("cloudwatch")

    async def sts_client(self) -> Any:
        return await self._get_client("sts")

    async def caller_identity(self) -> CallerIdentity:
        """
        Resolve the account the session is acting in.

        Raises:
            AuthError: If credentials are missing or rejected
        """
        client = await self.sts_client()
        try:
            response = await client.get_caller_identity()
        except (ClientError, BotoCoreError) as e:
            raise AuthError("Unable to get the AWS account ID", e) from e

        arn = response["Arn"]
        try:
            partition = partition_from_arn(arn)
        except ValueError as e:
            raise AuthError("Unexpected caller identity", e) from e
        return CallerIdentity(account_id=response["Account"], arn=arn, partition=partition)

    async def close(self) -> None:
        """Close all clients opened by this session."""
        try:
            await self._stack.aclose()
        finally:
            self._clients.clear()
            self._stack = AsyncExitStack()

    async def __aenter__(self) -> AwsSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()
