"""Post form submissions to a Web-to-Lead endpoint."""
import html
import logging
from typing import Any, Callable, Dict, List, Optional, Union

import click
from colorama import Fore

from web2lead.config import LeadConfig
from web2lead.api.lead_client import WebToLeadClient
from web2lead.builder.custom_data import parse_custom_data
from web2lead.builder.payload_builder import AlterHook, PayloadBuilder
from web2lead.errors import ConfigurationError
from web2lead.mapper.mapping import resolve_mapping
from web2lead.schema.models import FormDefinition, Operation, PostError, PostResult

logger = logging.getLogger(__name__)


class LeadPostHandler:
    """Builds and posts a lead for one submission lifecycle event."""

    def __init__(
        self,
        config: LeadConfig,
        client: Optional[WebToLeadClient] = None,
        resolver: Optional[Callable] = None,
        hooks: Optional[List[AlterHook]] = None,
    ):
        """
        Initialize handler.

        Args:
            config: Web-to-Lead settings
            client: HTTP client (created from config if omitted)
            resolver: Token resolver for custom data values
            hooks: Alter hooks run on the payload before it is posted
        """
        self.config = config
        self._owns_client = client is None
        self.client = client or WebToLeadClient(timeout=config.timeout)
        self.builder = PayloadBuilder(resolver=resolver, hooks=hooks)
        self.messages: List[str] = []

    def __enter__(self) -> "LeadPostHandler":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this handler created it."""
        if self._owns_client:
            self.client.close()

    def build_payload(
        self,
        operation: Union[Operation, str],
        submission: Dict[str, Any],
        form: Optional[FormDefinition] = None,
    ) -> Dict[str, str]:
        """Build the payload that would be posted for this event."""
        operation = Operation.parse(operation)
        operation_data = self.config.insert_data if operation == Operation.INSERT else ""

        return self.builder.build(
            submission,
            resolve_mapping(self.config.field_mapping),
            custom_overrides=parse_custom_data(self.config.custom_data),
            organization_id=self.config.organization_id,
            operation_overrides=parse_custom_data(operation_data),
            form=form,
        )

    def post(
        self,
        operation: Union[Operation, str],
        submission: Dict[str, Any],
        form: Optional[FormDefinition] = None,
    ) -> Optional[PostResult]:
        """
        Post a submission if the event calls for it.

        Returns:
            PostResult, or None when nothing was posted (not an insert, or
            no endpoint configured)
        """
        try:
            operation = Operation.parse(operation)
            self._check_postable(operation)
        except ValueError as e:
            logger.warning(f"Unknown submission operation: {e}")
            return None
        except ConfigurationError as e:
            logger.debug(f"Skipping lead post: {e}")
            return None

        url = self.config.endpoint_url
        try:
            payload = self.build_payload(operation, submission, form)
            result = self.client.send(url, payload)
        except Exception as e:
            logger.exception(f"Unexpected error while posting lead: {e}")
            result = PostResult(ok=False, error=PostError(message=str(e)))

        if result.ok:
            logger.info(f"Lead posted to {url}")
        else:
            logger.error(
                f"Web-to-Lead post failed: {result.error.message}",
                extra={
                    "form": getattr(form, "label", None),
                    "operation": operation.value,
                    "endpoint": url,
                    "error_message": result.error.message,
                },
            )

        if self.config.debug:
            self._debug(operation, url, result)

        return result

    def _check_postable(self, operation: Operation) -> None:
        if operation != Operation.INSERT:
            raise ConfigurationError(f"'{operation.value}' operations are not posted")
        if not self.config.endpoint_url:
            raise ConfigurationError("No Web-to-Lead URL configured")

    def _debug(self, operation: Operation, url: str, result: PostResult) -> None:
        """Echo request and response details."""
        click.echo(f"{Fore.CYAN}Web-to-Lead {operation.value}: POST {url}")
        for key, value in result.payload.items():
            click.echo(f"   {key} = {value}")

        if result.ok:
            status = getattr(result.response, "status_code", "")
            click.echo(f"{Fore.GREEN}   ✓ Response {status}")
            body = getattr(result.response, "text", "")
            if body:
                click.echo(body)
            self.messages.append(html.escape(f"Web-to-Lead post to {url} succeeded ({status})"))
        else:
            click.echo(f"{Fore.RED}   ❌ {result.error.message}")
            self.messages.append(html.escape(f"Web-to-Lead post to {url} failed: {result.error.message}"))
