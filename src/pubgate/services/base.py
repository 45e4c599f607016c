"""BaseService — foundation for all pubgate services.

Every service receives a :class:`Site` at construction time. The Site
provides the content stores, the guideline ruleset and the link graph.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pubgate.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from pubgate.errors import PubgateError
    from pubgate.infrastructure.site import Site

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class ValidationService(BaseService):
            def validate_post(self, slug: str) -> ServiceResult:
                try:
                    report = self.validate(slug)
                except PubgateError as exc:
                    return self._fatal("validate", exc)
                ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site

    def _fatal(self, op: str, exc: PubgateError) -> ServiceResult:
        """Failed result for an environment error that stops the run."""
        logger.debug("%s aborted: %s", op, exc)
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(
                code=exc.code,
                message=str(exc),
                detail={"root": str(self._site.root)},
            ),
        )
