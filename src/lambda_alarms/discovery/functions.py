"""Lambda function discovery with tag filtering."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import DiscoveryError
from ..models import FunctionRecord, TagFilter

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 10


class FunctionDiscovery:
    """
    Lists every Lambda function in a region and keeps those carrying a tag.

    Listing follows ``NextMarker`` until the last page; tags are then
    fetched with one ``ListTags`` call per function, at most
    ``max_concurrency`` at a time.

    Example:
        async with session.lambda_client() as client:
            discovery = FunctionDiscovery(client)
            functions = await discovery.list_tagged_functions(TagFilter("STAGE", "dev"))

    Attributes:
        client: aioboto3 Lambda client
        max_concurrency: Maximum in-flight ``ListTags`` calls
    """

    def __init__(self, client: Any, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.client = client
        self.max_concurrency = max_concurrency

    async def list_tagged_functions(self, tag_filter: TagFilter) -> list[FunctionRecord]:
        """
        List functions whose tags match ``tag_filter`` exactly.

        Returns:
            Matching functions, deduplicated by ARN and sorted by name

        Raises:
            DiscoveryError: If any page or tag lookup fails
        """
        functions = await self._list_functions()
        logger.debug("Listed %d Lambda functions, fetching tags", len(functions))

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _with_tags(entry: dict[str, str]) -> FunctionRecord:
            async with semaphore:
                tags = await self._get_tags(entry["FunctionArn"])
            return FunctionRecord(name=entry["FunctionName"], arn=entry["FunctionArn"], tags=tags)

        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(_with_tags(entry)) for entry in functions]
        except ExceptionGroup as eg:
            # One failed lookup cancels the rest; surface it unwrapped
            raise eg.exceptions[0]
        records = [t.result() for t in tasks]

        matched = [r for r in records if tag_filter.matches(r.tags)]
        matched.sort(key=lambda r: r.name)
        logger.debug(
            "%d of %d functions tagged %s=%s",
            len(matched),
            len(records),
            tag_filter.key,
            tag_filter.value,
        )
        return matched

    async def _list_functions(self) -> list[dict[str, str]]:
        """Page through ListFunctions, dropping repeated ARNs."""
        seen: set[str] = set()
        functions: list[dict[str, str]] = []
        marker: str | None = None

        while True:
            kwargs: dict[str, Any] = {}
            if marker:
                kwargs["Marker"] = marker

            try:
                response = await self.client.list_functions(**kwargs)
            except (ClientError, BotoCoreError) as e:
                raise DiscoveryError("ListFunctions", e) from e

            for fn in response.get("Functions", []):
                arn = fn["FunctionArn"]
                if arn in seen:
                    logger.debug("Skipping duplicate function %s", arn)
                    continue
                seen.add(arn)
                functions.append({"FunctionName": fn["FunctionName"], "FunctionArn": arn})

            marker = response.get("NextMarker")
            if not marker:
                break

        return functions

    async def _get_tags(self, arn: str) -> dict[str, str]:
        try:
            response = await self.client.list_tags(Resource=arn)
        except (ClientError, BotoCoreError) as e:
            raise DiscoveryError("ListTags", e, resource=arn) from e
        return dict(response.get("Tags", {}))
