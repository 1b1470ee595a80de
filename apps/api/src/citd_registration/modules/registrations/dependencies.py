"""
Registration pipeline collaborators.

The renderer, uploader, email client, pending queue and serial allocator
are created once per process in the application lifespan and handed to the
request handlers and the batch job through this container.
"""

import logging
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from citd_registration.core.config import Settings
from citd_registration.core.email import EmailClient
from citd_registration.core.storage import StorageUploader
from citd_registration.modules.registrations.documents import DocumentRenderer
from citd_registration.modules.registrations.queue import PendingQueue
from citd_registration.modules.registrations.serials import SerialAllocator

logger = logging.getLogger(__name__)


@dataclass
class RegistrationServices:
    settings: Settings
    session_maker: async_sessionmaker[AsyncSession]
    renderer: DocumentRenderer
    uploader: StorageUploader
    email_client: EmailClient
    queue: PendingQueue
    allocator: SerialAllocator

    async def start(self) -> None:
        await self.renderer.start()

    async def close(self) -> None:
        await self.renderer.close()


def build_services(
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession],
) -> RegistrationServices:
    """Create the pipeline collaborators from settings."""
    return RegistrationServices(
        settings=settings,
        session_maker=session_maker,
        renderer=DocumentRenderer(
            templates_dir=settings.templates_dir,
            output_dir=settings.output_dir,
            timeout_seconds=settings.render_timeout_seconds,
        ),
        uploader=StorageUploader(
            bucket=settings.storage_bucket,
            prefix=settings.storage_prefix,
            region=settings.aws_region,
            endpoint_url=settings.s3_endpoint_url,
            public_base_url=settings.storage_public_base_url,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
            timeout_seconds=settings.upload_timeout_seconds,
        ),
        email_client=EmailClient(
            api_key=settings.resend_api_key,
            default_sender=settings.email_from,
            timeout_seconds=settings.email_timeout_seconds,
        ),
        queue=PendingQueue(),
        allocator=SerialAllocator(),
    )


def get_services(request: Request) -> RegistrationServices:
    """FastAPI dependency returning the services created at startup."""
    return request.app.state.registration_services
